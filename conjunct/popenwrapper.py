import os
import subprocess
import pprint
import logging
import sys

# This module provides a wrapper for subprocess.Popen
# that can be used for debugging, and the runner the
# pipeline uses to invoke clang and opt.

# Internal logger
_logger = logging.getLogger(__name__)

def Popen(*pargs, **kwargs):
    _logger.debug("Conjunct Executing:\n" + pprint.pformat(pargs[0]) + "\nin: " +  os.getcwd())
    try:
        return subprocess.Popen(*pargs, **kwargs)
    except OSError:
        _logger.error("Conjunct Failed to execute: %s", pprint.pformat(pargs[0]))
        raise

def runCommand(cmd, env=None):
    """ Runs cmd to completion.

    Returns the pair (returncode, output) where output holds the
    combined stdout and stderr bytes. Raises OSError if the
    process could not be launched. env, when given, replaces the
    child's environment only.
    """
    proc = Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, env=env)
    output = proc.communicate()[0]
    _logger.debug('%s returned %d', cmd[0], proc.returncode)
    return (proc.returncode, output)

def echoOutput(output):
    """ Hands captured child output back to whoever is watching the build. """
    if not output:
        return
    sys.stdout.flush()
    stream = getattr(sys.stdout, 'buffer', None)
    if stream is None:
        sys.stdout.write(output.decode('utf-8', errors='replace'))
        sys.stdout.flush()
        return
    stream.write(output)
    stream.flush()
