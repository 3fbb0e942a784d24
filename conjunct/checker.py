"""
Module support for the conjunct-sanity-checker tool.

The conjunct-sanity-checker tool examines the users
environment and configuration file to see if they make
sense from the conjunct point of view. Useful first step
in trying to debug a failure.
"""

import sys
import os
import subprocess as sp
import errno

from .compilers import defaultClangDirEnv
from .config import loadConfig
from .errors import ConfigurationError
from .version import conjunct_version, conjunct_date
from .logconfig import loggingConfiguration

explain_CONFIG = """

conjunct only rewrites a compilation when it is given a configuration file
through the '--conjunct-config-path <file>' compiler flag. The file is YAML
and needs at least a non-zero 'seed' and the path to 'opt'; 'clang' may name
the clang binary or the directory holding clang and clang++.

"""

explain_CONJUNCT_DEFAULT_CLANG_DIR = """

Without a configuration file (or without 'clang' in it) conjunct looks for
clang and clang++ in the directory named by the environment variable
CONJUNCT_DEFAULT_CLANG_DIR, and failing that in your PATH.

"""

class Checker:
    def __init__(self, configPath=None):
        self.configPath = configPath

    def check(self):
        """Performs the environmental sanity check.

        Performs the following checks in order:
        0. Prints out the logging configuartion
        1. Check that the OS is supported.
        2. Checks the configuration file, if one was given.
        3. Checks that the clang and opt binaries work.
        """

        self.checkSelf()

        self.checkLogging()

        if not self.checkOS():
            print('I do not think we support your OS. Sorry.')
            return 1

        if not self.configPath:
            print(explain_CONFIG)
            return 0 if self.checkDefaultClang() else 1

        success = self.checkConfig()

        return 0 if success else 1

    def checkSelf(self):
        print(f'conjunct version: {conjunct_version}')
        print(f'conjunct released: {conjunct_date}\n')


    def checkLogging(self):
        (destination, level) = loggingConfiguration()
        print(f'Logging output to {destination if destination else "standard error"}.')
        if not level:
            print('Logging level not set, defaulting to WARNING.')
        else:
            print(f'Logging level set to {level}.')


    def checkOS(self):
        """Returns True if we support the OS."""
        return (sys.platform.startswith('freebsd') or
                sys.platform.startswith('linux') or
                sys.platform.startswith('darwin'))


    def checkDefaultClang(self):
        """Checks for clang and clang++ where conjunct looks without a config."""
        path = os.getenv(defaultClangDirEnv)
        cc = os.path.join(path, 'clang') if path else 'clang'
        cxx = os.path.join(path, 'clang++') if path else 'clang++'
        return self.checkCompilers(cc, cxx)


    def checkConfig(self):
        """Loads the configuration file, then checks its binaries."""
        try:
            cfg = loadConfig(self.configPath)
        except ConfigurationError as e:
            print(f'The configuration file {self.configPath} is not usable:\n\n\t{e}\n')
            print(explain_CONFIG)
            return False

        print(f'The configuration file {self.configPath} has seed {cfg.seed}.')
        print(f'opt is run with: {" ".join(cfg.optArgs)}\n')

        if cfg.clangPath is None:
            ok = self.checkDefaultClang()
        elif os.path.isdir(cfg.clangPath):
            ok = self.checkCompilers(os.path.join(cfg.clangPath, 'clang'),
                                     os.path.join(cfg.clangPath, 'clang++'))
        else:
            (ok, version) = self.checkExecutable(cfg.clangPath)
            self.report('clang', cfg.clangPath, ok, version, 0)

        (optOk, optVersion) = self.checkExecutable(cfg.optPath, '--version')
        self.report('optimizer', cfg.optPath, optOk, optVersion, 1)

        return ok and optOk


    def checkCompilers(self, cc, cxx):
        """Tests that the compilers actually exist."""
        (ccOk, ccVersion) = self.checkExecutable(cc)
        (cxxOk, cxxVersion) = self.checkExecutable(cxx)

        self.report('C compiler', cc, ccOk, ccVersion, 0)
        self.report('C++ compiler', cxx, cxxOk, cxxVersion, 0)

        if not ccOk or not cxxOk:
            print(explain_CONJUNCT_DEFAULT_CLANG_DIR)

        return ccOk or cxxOk


    def report(self, what, exe, ok, version, line):
        if not ok:
            print(f'The {what} {exe} was not found or not executable.\nBetter not try using conjunct!\n')
        else:
            print(f'The {what} {exe} is:\n\n\t{extractLine(version, line)}\n')


    def checkExecutable(self, exe, version_switch='--version'):
        """Checks that an executable exists, and is executable."""
        cmd = [exe, version_switch]
        try:
            compiler = sp.Popen(cmd, stdout=sp.PIPE, stderr=sp.PIPE)
            output = compiler.communicate()
            compilerOutput = f'{output[0].decode()}{output[1].decode()}'
        except OSError as e:
            if e.errno == errno.EPERM:
                return (False, f'{exe} not executable')
            if e.errno == errno.ENOENT:
                return (False, f'{exe} not found')
            return (False, f'{exe} not sure why, errno is {e.errno}')
        else:
            return (True, compilerOutput)


def extractLine(version, n):
    if not version:
        return version
    lines = version.split('\n')
    line = lines[n] if n < len(lines) else lines[-1]
    return line.strip() if line else line
