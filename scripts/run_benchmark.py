#!/usr/bin/env python3
"""Convenience script to run the default benchmark sweep."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from trafbench.cli import cli

if __name__ == '__main__':
    cli(['run', *sys.argv[1:]])
