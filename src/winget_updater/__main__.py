#!/usr/bin/env python3
"""winget-updater - Module entry point."""
import sys

from winget_updater.cli import main

if __name__ == "__main__":
    sys.exit(main())
