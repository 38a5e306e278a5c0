#!/usr/bin/env python3
"""
Shared Notes CLI.

Entry point for operating the note store from a terminal.

Usage:
    python cli.py --help
    python cli.py --user alice add --title "Plan" --category work
    python cli.py list
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.notes.cli import cli  # noqa: E402

if __name__ == "__main__":
    cli()
