from __future__ import annotations

"""
Main Entry Point.

Routes `python -m suitegen.main` to the CLI controller.
"""

import sys

from suitegen.interface.cli.app import main

if __name__ == "__main__":
    sys.exit(main())
