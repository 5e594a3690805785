"""
Main entry point for running fuel_dashboard as a module.

Usage:
    python -m fuel_dashboard <command> [options]
"""
import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
