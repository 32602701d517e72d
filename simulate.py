#!/usr/bin/env python3
"""
Convenience entry point for the headless accretion runner.

Usage:
    python simulate.py                        # Classic preset
    python simulate.py --preset tiny_cloud    # Named preset
    python simulate.py --list                 # List presets
"""

import sys

from tools.simulate import main

if __name__ == "__main__":
    sys.exit(main())
