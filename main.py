#!/usr/bin/env python3
"""
ASL AI - landmark-based sign classification.
Entry point; see ``aslai.cli`` for options.

Usage:
    python main.py --landmarks recording.npy
    python main.py --landmarks recording.npy --threads 4
"""

import os
import sys

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

from aslai.cli import main

if __name__ == "__main__":
    sys.exit(main())
