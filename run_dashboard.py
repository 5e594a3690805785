#!/usr/bin/env python3
"""
Convenience script to render the Fuel Dashboard without installing the package.

Usage:
    # All-time dashboard to dashboard.html (or FUEL_DASHBOARD_OUTPUT)
    python run_dashboard.py

    # Custom range to a chosen file
    python run_dashboard.py --from 2024-04-01 --to 2024-04-30 -o april.html

Any other fuel-dashboard command works too:
    python run_dashboard.py report --from 2024-04-01 --to 2024-04-30
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from fuel_dashboard.cli import COMMANDS, main


if __name__ == "__main__":
    argv = sys.argv[1:]
    flags = {"-v", "--verbose", "-q", "--quiet", "-h", "--help"}
    if not any(arg in COMMANDS for arg in argv):
        leading = [a for a in argv if a in flags]
        argv = leading + ["render"] + [a for a in argv if a not in flags]
    sys.exit(main(argv))
