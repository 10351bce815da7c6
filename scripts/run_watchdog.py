#!/usr/bin/env python3
"""
Entry point for the validator watchdog process.

The dev server launches this as a detached child when it starts the
validator:

    python scripts/run_watchdog.py <app_port> <timeout_ms> <verbose>

    # e.g. ping port 4000 every 30 seconds with diagnostics on
    python scripts/run_watchdog.py 4000 30000 true

The watchdog exits on its own once the app stops answering and the
validator has been killed.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from validator_watchdog.daemon import main


if __name__ == "__main__":
    sys.exit(main())
