"""
Main entry point for cdda_harvest.
Usage: python -m cdda_harvest
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
