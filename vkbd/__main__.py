#!/usr/bin/env python3
"""
vkbd entry point for running as a module: python3 -m vkbd
"""

import sys
from vkbd.cli import main

if __name__ == '__main__':
    sys.exit(main())
