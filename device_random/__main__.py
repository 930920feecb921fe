"""
Device Random entry point

Allows running the device service as a module:
    python -m device_random ...
"""

import sys

from .cli import main

if __name__ == '__main__':
    sys.exit(main())
