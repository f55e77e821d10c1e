"""Main entry point for ``python -m pyselect``."""

import sys

from pyselect.cli import main

if __name__ == "__main__":
    sys.exit(main())
