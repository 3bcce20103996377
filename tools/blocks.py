#!/usr/bin/env python3
"""
Print the BGZF block structure of a file.
See bgzfwalk.diagnostics for the available options.
"""

import sys

from bgzfwalk.diagnostics import main

if __name__ == '__main__':
    sys.exit(main())
