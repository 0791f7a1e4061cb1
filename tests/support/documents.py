"""Configuration documents shared by the parser, loader and CLI suites."""

from __future__ import annotations

VALID_CONFIG = b"""<?xml version="1.0" encoding="utf-8"?>
<logging autoReload="false" throwConfigExceptions="false">
  <variable name="logDir" value="/var/log/app"/>
  <targets>
    <target name="console" type="Console" layout="${message}"/>
    <target name="file" type="File" fileName="${logDir}/app.log"/>
  </targets>
  <rules>
    <logger name="*" minlevel="Info" writeTo="console,file"/>
  </rules>
</logging>
"""

# Mismatched closing tag, no markers at all.
MALFORMED_PLAIN = b'<logging><targets><target name="console" type="Console"></targets></logging>'

MALFORMED_WITH_AUTO_RELOAD = (
    b'<logging autoReload="true"><targets><target name="console" type="Console"></targets></logging>'
)

MALFORMED_WITH_THROW_EXCEPTIONS = b'<logging throwExceptions="true" autoReload="true"><rules>'

MALFORMED_WITH_THROW_CONFIG_EXCEPTIONS = b"<logging throwConfigExceptions='true'><rules>"

# Well-formed, but the rule writes to an undeclared target; markers only live in a comment.
SEMANTIC_ERROR_WITH_COMMENTED_MARKERS = b"""<!-- throwExceptions="true" autoReload="true" -->
<logging>
  <rules>
    <logger name="*" minlevel="Info" writeTo="missing"/>
  </rules>
</logging>
"""

# Well-formed with reload already enabled, but an unknown level name.
SEMANTIC_ERROR_WITH_AUTO_RELOAD_ATTRIBUTE = b"""<logging autoReload="true">
  <targets>
    <target name="console" type="Console"/>
  </targets>
  <rules>
    <logger name="*" minlevel="Verbose" writeTo="console"/>
  </rules>
</logging>
"""

# UTF-16 with a byte-order mark; the reader decodes it, then hits a mismatched tag.
MALFORMED_UTF16_WITH_AUTO_RELOAD = (
    '<?xml version="1.0" encoding="utf-16"?><logging autoReload="true"><targets></logging>'.encode("utf-16")
)

MALFORMED_UTF16_WITH_THROW_EXCEPTIONS = (
    '<?xml version="1.0" encoding="utf-16"?><logging throwExceptions="true"><targets></logging>'.encode("utf-16")
)
