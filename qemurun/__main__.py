"""Module entry point: ``python -m qemurun``."""

import sys

from qemurun.cli import main

if __name__ == "__main__":
    sys.exit(main())
