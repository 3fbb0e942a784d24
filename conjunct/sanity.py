#!/usr/bin/env python
"""This does some simple sanity checks on the configuration.

It attempts to print informative results of that check.
Hopefully never dumping a python stack trace.

usage: conjunct-sanity-checker [config.yaml]
"""

import sys

from .checker import Checker

def main():
    configPath = sys.argv[1] if len(sys.argv) > 1 else None
    return Checker(configPath).check()


if __name__ == '__main__':
    sys.exit(main())
