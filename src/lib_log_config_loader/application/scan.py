"""Raw-text marker scan used when structural parsing fails.

Purpose
-------
Recover operator intent from a configuration file that could not be parsed:
should the failure propagate, and should the file stay watched for changes.
The scan is textual on purpose; it must work on content the XML reader gave up
on.

Contents
--------
* :class:`RawScanFlags` – booleans recovered from the text.
* :func:`decode_raw_text` – bytes to text honouring byte-order marks and the
  XML declaration.
* :func:`scan_for_boolean_parameter` – case-insensitive attribute lookup.
* :func:`scan_markers` – applies the three markers, honouring the throw markers
  only when the reader reported an actual syntax error.
"""

from __future__ import annotations

import codecs
import re
from dataclasses import dataclass
from typing import Final

THROW_EXCEPTIONS_MARKER: Final[str] = "throwExceptions"
THROW_CONFIG_EXCEPTIONS_MARKER: Final[str] = "throwConfigExceptions"
AUTO_RELOAD_MARKER: Final[str] = "autoReload"

# UTF-32 marks first: BOM_UTF32_LE starts with BOM_UTF16_LE.
_BYTE_ORDER_MARKS: Final[tuple[tuple[bytes, str], ...]] = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)
_DECLARED_ENCODING: Final[re.Pattern[bytes]] = re.compile(
    rb"^\s*<\?xml\b[^>]*?\bencoding\s*=\s*[\"']([A-Za-z0-9._-]+)[\"']"
)


@dataclass(frozen=True, slots=True)
class RawScanFlags:
    """Markers found in unparsed configuration text."""

    throw_exceptions: bool = False
    throw_config_exceptions: bool = False
    auto_reload: bool = False

    @property
    def requests_propagation(self) -> bool:
        """Return ``True`` when either throw marker was found."""

        return self.throw_exceptions or self.throw_config_exceptions


NO_FLAGS: Final[RawScanFlags] = RawScanFlags()


def decode_raw_text(payload: bytes) -> str:
    """Decode *payload* the way the XML reader would have.

    A byte-order mark wins, then an ASCII-compatible ``encoding`` declaration;
    anything else is read as UTF-8 with undecodable bytes replaced.

    Examples
    --------
    >>> decode_raw_text('<logging autoReload="true">'.encode("utf-16"))
    '<logging autoReload="true">'
    >>> decode_raw_text(b'<?xml version="1.0" encoding="ascii"?><logging')[-8:]
    '<logging'
    """

    for mark, encoding in _BYTE_ORDER_MARKS:
        if payload.startswith(mark):
            return payload.decode(encoding, errors="replace")
    encoding = "utf-8"
    declared = _DECLARED_ENCODING.match(payload)
    if declared is not None:
        try:
            encoding = codecs.lookup(declared.group(1).decode("ascii")).name
        except LookupError:
            encoding = "utf-8"
        # An ASCII-readable declaration rules out wide encodings without a mark.
        if encoding.startswith(("utf-16", "utf-32")):
            encoding = "utf-8"
    return payload.decode(encoding, errors="replace")


def scan_for_boolean_parameter(content: str, name: str, value: bool = True) -> bool:
    """Return ``True`` when ``name="value"`` or ``name='value'`` appears in *content*.

    Matching ignores case and tolerates whitespace around ``=``. Only the
    opening quote is required, so an attribute cut off by a truncated file
    still counts; a longer word such as ``truex`` does not.

    Examples
    --------
    >>> scan_for_boolean_parameter('<logging AUTORELOAD="True">', 'autoReload')
    True
    >>> scan_for_boolean_parameter("<logging autoReload = 'true'", 'autoReload')
    True
    >>> scan_for_boolean_parameter('<logging autoReload="false">', 'autoReload')
    False
    >>> scan_for_boolean_parameter('<logging autoReload="truex">', 'autoReload')
    False
    >>> scan_for_boolean_parameter('<logging autoReload="true', 'autoReload')
    True
    """

    literal = "true" if value else "false"
    pattern = rf"\b{re.escape(name)}\s*=\s*[\"']{literal}(?!\w)"
    return re.search(pattern, content, flags=re.IGNORECASE) is not None


def scan_markers(content: str, *, syntax_error: bool) -> RawScanFlags:
    """Collect :class:`RawScanFlags` from raw configuration text.

    The throw markers are only honoured when *syntax_error* is ``True``;
    otherwise a ``throwExceptions="true"`` inside a comment of a well-formed
    document would escalate a purely semantic failure. The generic marker
    short-circuits the configuration-specific one.

    Examples
    --------
    >>> scan_markers('<logging throwExceptions="true" autoReload="true"', syntax_error=True)
    RawScanFlags(throw_exceptions=True, throw_config_exceptions=False, auto_reload=True)
    >>> scan_markers('<!-- throwExceptions="true" --><logging/>', syntax_error=False)
    RawScanFlags(throw_exceptions=False, throw_config_exceptions=False, auto_reload=False)
    """

    throw_exceptions = False
    throw_config_exceptions = False
    if syntax_error:
        throw_exceptions = scan_for_boolean_parameter(content, THROW_EXCEPTIONS_MARKER)
        if not throw_exceptions:
            throw_config_exceptions = scan_for_boolean_parameter(content, THROW_CONFIG_EXCEPTIONS_MARKER)
    return RawScanFlags(
        throw_exceptions=throw_exceptions,
        throw_config_exceptions=throw_config_exceptions,
        auto_reload=scan_for_boolean_parameter(content, AUTO_RELOAD_MARKER),
    )
