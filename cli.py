#!/usr/bin/env python3
"""
metactl CLI.

Command-line client for the remote server's meta RPC service.
Built with Typer for type-safe commands and Rich for formatted output.
Installed as the `metactl` console script; this file runs it from a checkout.

Usage:
    python cli.py --help                  # Show help
    python cli.py meta status             # Server status
    python cli.py meta config             # Server config as JSON
    python cli.py server start            # Start the Meta RPC server
"""

import sys
from pathlib import Path

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from metactl.cli.main import app

if __name__ == "__main__":
    app()
