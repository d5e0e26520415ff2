#!/usr/bin/env python3
"""
Simple wrapper to share or export a class marks table
Usage: python3 generate_marksheet.py entry --roster class_7.csv --class 7 --subject Math --test 3
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from marksheet_builder.cli import main

if __name__ == "__main__":
    sys.exit(main())
