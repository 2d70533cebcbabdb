"""
Module execution entry point.

Allows running with: python -m merked_cli
"""

import sys
from merked_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
