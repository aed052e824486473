#!/usr/bin/env python3
"""Start the Skyport panel API without installing the package.

Usage:
    python scripts/start_panel.py [--port 3001] [--host 0.0.0.0]

Configuration is read from config/panel.yaml; SKYPORT_* environment
variables override it. SKYPORT_SECRET_KEY must be set.
"""

import os
import sys

# Ensure project root is on path so `from skyport_panel.…` works
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skyport_panel.cli import main

if __name__ == "__main__":
    sys.exit(main(["serve", *sys.argv[1:]]))
