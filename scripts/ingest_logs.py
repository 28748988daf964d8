#!/usr/bin/env python3
"""
CLI script to parse CDN syslog files into download events.

Usage:
    # Parse gzip files, NDJSON events on stdout, logs on stderr
    python scripts/ingest_logs.py data/edge-1.log.gz data/edge-2.log.gz

    # JSON logs, events written to a file
    python scripts/ingest_logs.py data/edge-1.log.gz --log-style json -o events.ndjson

    # Trace every dropped line
    LINEHAUL_LOG=info,linehaul.pipeline=trace python scripts/ingest_logs.py data/edge-1.log.gz
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from linehaul.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
