#!/usr/bin/env python

import contextlib
import io
import os
import shutil
import sys
import tempfile
import unittest
from unittest import mock

from fakes import makeFakeBinary

from conjunct import conjunct, logconfig
from conjunct.checker import Checker, extractLine
from conjunct.compilers import defaultClangDirEnv
from conjunct.version import conjunct_version


class MainTest(unittest.TestCase):
    """
    The conjunct command, with fake compilers
    """
    def setUp(self):
        self.dir = tempfile.mkdtemp(prefix='conjunct-test')
        self.addCleanup(shutil.rmtree, self.dir, True)
        self.opt = makeFakeBinary(self.dir, 'opt', 'echo "LLVM version 17.0.6"')
        # a clang that reports its version, and otherwise fails the way a link would
        script = ('case "$1" in --version) echo "clang version 17.0.6"; exit 0;; esac\n'
                  'echo "clang: error: linker command failed"\nexit 3')
        self.clang = makeFakeBinary(self.dir, 'clang', script)
        makeFakeBinary(self.dir, 'clang++', script)

    def runMain(self, argv):
        with mock.patch.object(sys, 'argv', argv):
            return conjunct.main()

    def test_version(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            rc = self.runMain(['conjunct', '--conjunct-version'])
        self.assertEqual(rc, 0)
        self.assertIn(conjunct_version, out.getvalue())

    def test_passthrough_without_config(self):
        with mock.patch.dict(os.environ, {defaultClangDirEnv: self.dir}):
            rc = self.runMain(['conjunct', 'a.o', 'b.o', '-o', 'prog', '--conjunct-verbose'])
        self.assertEqual(rc, 3)

    def test_passthrough_with_config(self):
        configPath = os.path.join(self.dir, 'conjunct.yaml')
        with open(configPath, 'w') as f:
            f.write(f'seed: 1\nclang: {self.dir}\nopt: {self.opt}\n')
        rc = self.runMain(['conjunct', '--conjunct-config-path', configPath, 'a.o', '-o', 'prog'])
        self.assertEqual(rc, 3)

    def test_bad_config(self):
        configPath = os.path.join(self.dir, 'conjunct.yaml')
        with open(configPath, 'w') as f:
            f.write('seed: 0\n')
        rc = self.runMain(['conjunct', '--conjunct-config-path', configPath, '-c', 'a.c'])
        self.assertEqual(rc, 1)


class LogConfigTest(unittest.TestCase):
    """
    CONJUNCT_OUTPUT_LEVEL handling
    """
    def test_invalid_level_exits(self):
        with mock.patch.dict(os.environ, {'CONJUNCT_OUTPUT_LEVEL': 'CHATTY'}):
            with self.assertRaises(SystemExit):
                logconfig.logConfig()

    def test_configuration_is_reported(self):
        with mock.patch.dict(os.environ, {'CONJUNCT_OUTPUT_LEVEL': 'info',
                                          'CONJUNCT_LOG_FILE': '/tmp/conjunct.log'}):
            self.assertEqual(logconfig.loggingConfiguration(), ('/tmp/conjunct.log', 'info'))


class CheckerTest(unittest.TestCase):
    """
    conjunct-sanity-checker
    """
    def setUp(self):
        self.dir = tempfile.mkdtemp(prefix='conjunct-test')
        self.addCleanup(shutil.rmtree, self.dir, True)
        self.clang = makeFakeBinary(self.dir, 'clang', 'echo "clang version 17.0.6"')
        self.opt = makeFakeBinary(self.dir, 'opt', 'echo "LLVM (http://llvm.org/):"; echo "  LLVM version 17.0.6"')

    def check(self, configPath):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            rc = Checker(configPath).check()
        return (rc, out.getvalue())

    def test_good_config(self):
        configPath = os.path.join(self.dir, 'conjunct.yaml')
        with open(configPath, 'w') as f:
            f.write(f'seed: 7\nclang: {self.clang}\nopt: {self.opt}\npasses: [lowerswitch]\n')
        (rc, out) = self.check(configPath)
        self.assertEqual(rc, 0)
        self.assertIn('clang version 17.0.6', out)
        self.assertIn('LLVM version 17.0.6', out)
        self.assertIn('-passes=lowerswitch', out)

    def test_bad_config(self):
        (rc, out) = self.check(os.path.join(self.dir, 'missing.yaml'))
        self.assertEqual(rc, 1)
        self.assertIn('not usable', out)

    def test_extract_line(self):
        self.assertEqual(extractLine('a\n  b  \n', 1), 'b')
        self.assertEqual(extractLine('a', 5), 'a')
        self.assertEqual(extractLine('', 0), '')


if __name__ == '__main__':
    unittest.main()
