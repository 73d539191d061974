"""
Entry point for running channelframe as a module.

Usage:
    python -m channelframe
"""

import sys

from .main import main

if __name__ == "__main__":
    sys.exit(main())
