#!/usr/bin/env python3
"""
Live Intel - Main Application Entry Point.

============================================================
SINGLE ENTRYPOINT
============================================================
Starts the live intel orchestrator as a long-lived process.

- Compatible with PM2 process management
- Stops cleanly on SIGINT / SIGTERM

============================================================
USAGE
============================================================
Direct execution:
    python app.py --interval 60

With PM2:
    pm2 start app.py --interpreter python --name live-intel -- --log-format json

Environment-based configuration (.env is loaded):
    LIVE_INTEL_RUN_INTERVAL_SECONDS=30 python app.py

============================================================
"""

import sys

from live_intel.cli import main


if __name__ == "__main__":
    sys.exit(main())
