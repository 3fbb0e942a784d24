#!/usr/bin/env python

import os
import shutil
import subprocess
import sys
import unittest


test_output_directory = "/tmp/test-conjunct"
test_files_directory = os.path.join(os.path.dirname(os.path.realpath(__file__)), "test_files")
root_directory = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))


@unittest.skipUnless(shutil.which('clang') and shutil.which('opt'), 'needs clang and opt in $PATH')
class DriverTest(unittest.TestCase):
    """
    Runs conjunct as a build would, against the real clang and opt
    """
    def setUp(self):
        """
        Creates the test directory in /tmp, and a configuration pointing at clang and opt
        :return:
        """
        if not os.path.exists(test_output_directory):
            os.makedirs(test_output_directory)
        self.config = os.path.join(test_output_directory, 'conjunct.yaml')
        with open(self.config, 'w') as f:
            f.write('seed: 123456789\n')
            f.write(f'clang: {shutil.which("clang")}\n')
            f.write(f'opt: {shutil.which("opt")}\n')
            f.write('passes:\n  - lowerswitch\n')

    def tearDown(self):
        """
        remove all temporary test files
        :return:
        """
        shutil.rmtree(test_output_directory)

    @property
    def env(self):
        env = os.environ.copy()
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [root_directory, env.get("PYTHONPATH")]))
        return env

    def launch_proc(self, args):
        """
        Launches conjunct with args in test_output_directory
        :param args: the compiler arguments
        :return: the exit code
        """
        cmd = [sys.executable, '-m', 'conjunct.conjunct'] + args
        return subprocess.call(cmd, env=self.env, cwd=test_output_directory)

    def test_can_compile_simple_file(self):
        """
        Checks that the pipeline produces an object file
        :return:
        """
        rc = self.launch_proc(['--conjunct-config-path', self.config,
                               '-c', os.path.join(test_files_directory, 'hello.c'), '-o', 'hello.o'])
        self.assertEqual(rc, 0)
        self.assertTrue(os.path.getsize(os.path.join(test_output_directory, 'hello.o')) > 0)

    def test_can_dry_run(self):
        """
        Checks that a dry run still produces an object file
        :return:
        """
        rc = self.launch_proc(['--conjunct-config-path', self.config, '--conjunct-dry-run',
                               '-c', os.path.join(test_files_directory, 'hello.c'), '-o', 'hello.o'])
        self.assertEqual(rc, 0)
        self.assertTrue(os.path.exists(os.path.join(test_output_directory, 'hello.o')))

    def test_can_compile_and_link(self):
        """
        Checks that objects built through conjunct link, and linking goes through untouched
        :return:
        """
        self.assertEqual(self.launch_proc(['--conjunct-config-path', self.config,
                                           '-c', os.path.join(test_files_directory, 'hello.c'),
                                           '-o', 'hello.o']), 0)
        self.assertEqual(self.launch_proc(['--conjunct-config-path', self.config,
                                           'hello.o', '-o', 'hello']), 0)
        output = subprocess.check_output([os.path.join(test_output_directory, 'hello')])
        self.assertEqual(output, b'hello 20\n')

    def test_compile_error_is_reported(self):
        """
        Checks that a broken source file fails the build with clang's exit code
        :return:
        """
        broken = os.path.join(test_output_directory, 'broken.c')
        with open(broken, 'w') as f:
            f.write('int main(void) { return }\n')
        rc = self.launch_proc(['--conjunct-config-path', self.config, '-c', broken, '-o', 'broken.o'])
        self.assertNotEqual(rc, 0)
        self.assertFalse(os.path.exists(os.path.join(test_output_directory, 'broken.o')))


if __name__ == '__main__':
    unittest.main()
