#!/usr/bin/env python
"""
Launcher script for the Pack Planner command-line interface.

This script ensures the correct Python path is set before launching the app.
"""

import sys
from pathlib import Path

# Add the src directory to the Python path
src_dir = Path(__file__).parent / "src"
sys.path.insert(0, str(src_dir))

# Now import and run the CLI
from pack_planner.main import main

if __name__ == "__main__":
    sys.exit(main())
