#!/usr/bin/env python
"""Run an entitydiff comparison from the command line."""

import sys

from entitydiff.cli import main


if __name__ == "__main__":
    sys.exit(main())
