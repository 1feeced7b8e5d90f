"""
Module entrypoint so that ``python -m cassettes <db>`` works without the
console script installed.
"""

from __future__ import annotations

import sys

from cassettes.cli import main

if __name__ == "__main__":
    sys.exit(main())
