"""
Main entry point for the jobdash package.

Usage:
    python -m jobdash [command] [options]
"""
import sys

from jobdash.cli import main

if __name__ == "__main__":
    sys.exit(main())
