"""
Constants for syslog framing and CDN access-log field grammar.
"""

# =============================================================================
# Wire Format
# =============================================================================

# Placeholder token for a field that is intentionally absent
NIL = "-"

# RFC 5424 caps PRI at facility 23, severity 7
MAX_PRIORITY = 191

# Severity names indexed by PRI % 8
SYSLOG_SEVERITIES = (
    "emerg",
    "alert",
    "crit",
    "err",
    "warning",
    "notice",
    "info",
    "debug",
)

# HTTP methods recognised as the first token of the compact log layout
HTTP_METHODS = frozenset(
    [
        "GET",
        "HEAD",
        "POST",
        "PUT",
        "PATCH",
        "DELETE",
        "OPTIONS",
        "TRACE",
        "CONNECT",
        "PURGE",
    ]
)

# =============================================================================
# Logging
# =============================================================================

# Environment variable holding the log level directives
LOG_LEVEL_ENV = "LINEHAUL_LOG"
LOG_STYLE_ENV = "LINEHAUL_LOG_STYLE"
CONFIG_PATH_ENV = "LINEHAUL_CONFIG"

DEFAULT_LOG_LEVEL = "debug"
DEFAULT_LOG_STYLE = "readable"

# Longest raw line echoed into exception messages
MAX_ERROR_CONTENT_LENGTH = 100

# =============================================================================
# Package
# =============================================================================

PACKAGE_VERSION = "0.1.0"
