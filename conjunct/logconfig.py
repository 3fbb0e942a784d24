"""
  This module is intended to be imported by command line tools so they can
  configure the root logger so that other loggers used in other modules can
  inherit the configuration.
"""
import logging
import os
import sys

_loggingEnvLevel = 'CONJUNCT_OUTPUT_LEVEL'

_loggingDestination = 'CONJUNCT_LOG_FILE'

_validLogLevels = ['ERROR', 'WARNING', 'INFO', 'DEBUG']

_briefFormat = '%(levelname)s:%(message)s'
_debugFormat = '%(levelname)s::%(module)s.%(funcName)s() at %(filename)s:%(lineno)d ::%(message)s'

# the package logger; every module logs through a child of it
_packageName = 'conjunct'

def logConfig(verbose=False):

    handlers = [logging.StreamHandler(sys.stderr)]

    # the log file gets a copy of everything, builds usually swallow stderr
    destination = os.getenv(_loggingDestination)
    if destination:
        handlers.append(logging.FileHandler(destination, mode='a'))

    logging.basicConfig(level=logging.WARNING, format=_briefFormat, handlers=handlers)

    retval = logging.getLogger(_packageName)

    level = os.getenv(_loggingEnvLevel)

    if level:
        level = level.upper()
        if not level in _validLogLevels:
            logging.error('"%s" is not a valid value for %s. Valid values are %s',
                          level, _loggingEnvLevel, _validLogLevels)
            sys.exit(1)
        else:
            retval.setLevel(getattr(logging, level))

    if verbose:
        retval.setLevel(logging.DEBUG)

    # Adjust the format if debugging
    if retval.getEffectiveLevel() == logging.DEBUG:
        formatter = logging.Formatter(_debugFormat)
        for h in logging.getLogger().handlers:
            h.setFormatter(formatter)

    return retval

def loggingConfiguration():
    destination = os.getenv(_loggingDestination)
    level = os.getenv(_loggingEnvLevel)
    return (destination, level)


def informUser(msg):
    sys.stderr.write(msg)
