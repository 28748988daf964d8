"""Download event models and the access-log grammar parser."""

from .models import Event, Package
from .packages import (
    distribution_type,
    normalize_project_name,
    package_from_path,
    parse_filename,
)
from .parser import COMPACT_FIELDS, FULL_FIELDS, decode_user_agent, parse_event

__all__ = [
    # Models
    "Event",
    "Package",
    # Package identification
    "package_from_path",
    "parse_filename",
    "distribution_type",
    "normalize_project_name",
    # Event parsing
    "parse_event",
    "decode_user_agent",
    "FULL_FIELDS",
    "COMPACT_FIELDS",
]
