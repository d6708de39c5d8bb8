"""
Module execution entry point.

Allows running with: python -m curlwrap_cli
"""

import sys
from curlwrap_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
