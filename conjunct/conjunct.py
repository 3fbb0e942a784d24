#!/usr/bin/env python
"""This is a wrapper around the real compiler.

When the build compiles a single source file to an object
file it emits LLVM bitcode instead, runs a configured set
of opt passes over it, and then builds the object file from
the transformed bitcode.  Everything else is handed to the
real clang untouched.

conjunct is meant to be installed in place of clang (or
clang++), or passed as CC/CXX, with the configuration given
through '--conjunct-config-path' in the compiler flags.
"""

import os
import sys

from .arglist import hasFlag, removeAllFlags
from .compilers import defaultClangDirEnv, findClang, getClangBinaryName
from .config import extractConfigFromArgs
from .errors import ConjunctError
from .logconfig import logConfig
from .pipeline import classifyAndMaybeRun, runOriginalClang
from .sourcefile import classifySource
from .version import conjunct_version

verboseFlag = '--conjunct-verbose'
versionFlag = '--conjunct-version'


def main():
    """ The entry point to conjunct.
    """
    args = list(sys.argv)[1:]
    invokedAs = os.path.basename(sys.argv[0])

    if hasFlag(args, versionFlag):
        defaultClangDir = os.getenv(defaultClangDirEnv) or ''
        print(f'Conjunct version {conjunct_version} | Default clang path: {defaultClangDir}')
        return 0

    verbose = hasFlag(args, verboseFlag)
    args = removeAllFlags(args, verboseFlag, False)
    _logger = logConfig(verbose)
    if verbose:
        _logger.debug('Running conjunct in verbose mode')

    legible_argstring = ' '.join(args)
    _logger.info('Entering CC [%s]', legible_argstring)

    try:
        (args, cfg) = extractConfigFromArgs(args)
        if cfg is None:
            # No configuration: behave exactly like clang.
            (_, sourceType) = classifySource(args)
            clangPath = findClang(None, getClangBinaryName(invokedAs, sourceType))
            return runOriginalClang(clangPath, args)
    except ConjunctError as e:
        _logger.error('failed to extract config from args: %s', e)
        return e.exitCode

    rc = classifyAndMaybeRun(args, cfg, invokedAs)
    _logger.debug('Calling %s returned %d', list(sys.argv), rc)
    return rc


if __name__ == '__main__':
    sys.exit(main())
