"""
Default classification tables.

New client signatures or bot patterns are additions to these lists, not
code changes. Order matters for SIGNATURE_RULES: the first rule whose
grammar accepts the string wins.
"""

from .matchers import LiteralMatcher, Matcher, PatternMatcher, PrefixMatcher, SignatureRule

# Token shapes shared by the legacy grammars. Names must start with a letter
# so fragments of a broken JSON payload never pass as "name/version".
_NAME = r"[A-Za-z][\w.+-]*"
_VERSION = r"[\w.+-]+"

# =============================================================================
# Ignorable traffic
# =============================================================================

# Crawlers, matched as whole words anywhere in the string
_CRAWLERS = [
    "Googlebot",
    "bingbot",
    "YandexBot",
    "Baiduspider",
    "DuckDuckBot",
    "Applebot",
    "AhrefsBot",
    "SemrushBot",
    "MJ12bot",
    "DotBot",
    "PetalBot",
    "Bytespider",
    "GPTBot",
    "ClaudeBot",
    "CCBot",
    "facebookexternalhit",
    "Slurp",
]

IGNORED_MATCHERS: list[Matcher] = [
    PatternMatcher(rf"\b(?:{'|'.join(_CRAWLERS)})\b"),
    # Load balancer and uptime probes
    PrefixMatcher("ELB-HealthChecker/"),
    PrefixMatcher("GoogleHC/"),
    PrefixMatcher("kube-probe/"),
    PrefixMatcher("Datadog Agent/"),
    PrefixMatcher("Blackbox Exporter/"),
    PrefixMatcher("Prometheus/"),
    PrefixMatcher("check_http/"),
    PrefixMatcher("NewRelicPinger/"),
    PatternMatcher(r"\bPingdom\.com_bot"),
    PatternMatcher(r"\bUptimeRobot/"),
    PatternMatcher(r"\bStatusCake\b"),
    PatternMatcher(r"\bSite24x7\b"),
    LiteralMatcher("fastly-healthcheck"),
    LiteralMatcher("health-check"),
]

# =============================================================================
# Legacy client grammars
# =============================================================================

SIGNATURE_RULES: list[SignatureRule] = [
    # pip 1.4 - 6: "pip/1.5.6 CPython/2.7.8 Darwin/13.4.0"
    SignatureRule(
        "pip",
        rf"pip/(?P<installer_version>{_VERSION})"
        rf"(?: (?P<implementation_name>{_NAME})/(?P<implementation_version>{_VERSION}))?"
        rf"(?: (?P<system_name>{_NAME})/(?P<system_release>{_VERSION}))?",
        installer_name="pip",
    ),
    SignatureRule(
        "setuptools",
        rf"Python-urllib/(?P<python>\d\.\d+) "
        rf"(?P<installer_name>setuptools|distribute)/(?P<installer_version>{_VERSION})",
    ),
    SignatureRule(
        "setuptools-reversed",
        rf"(?P<installer_name>setuptools|distribute)/(?P<installer_version>{_VERSION}) "
        rf"Python-urllib/(?P<python>\d\.\d+)",
    ),
    SignatureRule(
        "pex",
        rf"pex/(?P<installer_version>{_VERSION})",
        installer_name="pex",
    ),
    # "conda/4.3.21 requests/2.14.2 CPython/3.6.1 Linux/4.4.0 ubuntu/16.04 glibc/2.23"
    SignatureRule(
        "conda",
        rf"conda/(?P<installer_version>{_VERSION})"
        rf"(?: requests/{_VERSION})?"
        rf"(?: (?P<implementation_name>CPython|PyPy)/(?P<implementation_version>{_VERSION}))?"
        rf"(?: (?P<system_name>{_NAME})/(?P<system_release>{_VERSION}))?"
        rf"(?: (?P<distro_name>{_NAME})/(?P<distro_version>{_VERSION}))?"
        rf"(?: .*)?",
        installer_name="conda",
    ),
    SignatureRule(
        "bazel",
        rf"Bazel/(?:release )?(?P<installer_version>{_VERSION})",
        installer_name="Bazel",
    ),
    # "Homebrew/4.0.4 (Macintosh; Intel Mac OS X 13.2) curl/7.86.0"
    SignatureRule(
        "homebrew",
        rf"Homebrew/(?P<installer_version>{_VERSION}) "
        rf"\(Macintosh; (?:Intel|arm64|ARM) (?:Mac OS X|macOS) (?P<system_release>[^)]+)\)"
        rf"(?: .*)?",
        installer_name="Homebrew",
        system_name="macOS",
    ),
    # "bandersnatch/4.4.0 (cpython 3.8.5-final0, Linux x86_64)"
    SignatureRule(
        "bandersnatch",
        rf"bandersnatch/(?P<installer_version>{_VERSION})"
        rf"(?: \((?P<implementation_name>{_NAME}) (?P<implementation_version>[^\s,]+), "
        rf"(?P<system_name>{_NAME}) (?P<cpu>[^\s)]+)\))?",
        installer_name="bandersnatch",
    ),
    SignatureRule(
        "devpi",
        rf"devpi-server/(?P<installer_version>{_VERSION})(?: .*)?",
        installer_name="devpi",
    ),
    SignatureRule(
        "z3c.pypimirror",
        rf"z3c\.pypimirror/(?P<installer_version>{_VERSION})",
        installer_name="z3c.pypimirror",
    ),
    SignatureRule(
        "pep381client",
        rf"pep381client(?:-proxy)?/(?P<installer_version>{_VERSION})",
        installer_name="pep381client",
    ),
    SignatureRule(
        "artifactory",
        rf"Artifactory/(?P<installer_version>{_VERSION})(?: .*)?",
        installer_name="Artifactory",
    ),
    SignatureRule(
        "nexus",
        rf"Nexus/(?P<installer_version>{_VERSION})(?: .*)?",
        installer_name="Nexus",
    ),
    SignatureRule(
        "uv",
        rf"uv/(?P<installer_version>{_VERSION})",
        installer_name="uv",
    ),
    SignatureRule(
        "poetry",
        rf"[Pp]oetry/(?P<installer_version>{_VERSION})(?: .*)?",
        installer_name="poetry",
    ),
    SignatureRule(
        "pdm",
        rf"pdm/(?P<installer_version>{_VERSION})(?: .*)?",
        installer_name="pdm",
    ),
    SignatureRule(
        "requests",
        rf"python-requests/(?P<installer_version>{_VERSION})",
        installer_name="requests",
    ),
    SignatureRule(
        "curl",
        rf"curl/(?P<installer_version>{_VERSION})",
        installer_name="curl",
    ),
    SignatureRule(
        "wget",
        rf"Wget/(?P<installer_version>{_VERSION})(?: .*)?",
        installer_name="Wget",
    ),
    SignatureRule(
        "browser",
        r"Mozilla/5\.0 .+",
        installer_name="Browser",
    ),
]
