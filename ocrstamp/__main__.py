#!/usr/bin/env python3
"""Main entry point for ocrstamp package."""

import sys
from ocrstamp.cli import main

if __name__ == "__main__":
    sys.exit(main())
