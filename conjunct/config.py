""" Reads conjunct's YAML configuration file.

The configuration is pointed at by '--conjunct-config-path <file>'
on the compiler command line and looks like:

    seed: 123456789
    clang: ~/llvm/bin/clang          # or the directory holding clang and clang++
    opt: ~/llvm/bin/opt
    passes:
      - lowerswitch
    opt-args:                        # passed to opt verbatim, in order
      - -load-pass-plugin=/opt/passes/libObf.so
    opt-extra-args:                  # passed to opt as key=value
      -seed: "123456789"
    opt-env:                         # added to opt's environment only
      OBF_LEVEL: "3"
"""
import collections
import logging
import os

import yaml

from .arglist import getFlagValue, hasFlag, removeAllFlags, removeFlag
from .compilers import checkIfClangBinary, checkIfOptBinary
from .errors import ConfigurationError
from .utils import expandPath

# Internal logger
_logger = logging.getLogger(__name__)

configPathFlag = '--conjunct-config-path'
dryRunFlag = '--conjunct-dry-run'
retainTempDirFlag = '--conjunct-retain-temp-dir'

ConjunctConfig = collections.namedtuple('ConjunctConfig', [
    # Seed for random number generation; only the passes care about it.
    'seed',
    # The clang binary, or a directory holding clang and clang++. May be None.
    'clangPath',
    # The opt binary.
    'optPath',
    # Arguments opt is run with, before the input file.
    'optArgs',
    # Environment variables added to opt's environment.
    'optEnv',
    # Keep the temporary directory around for inspection.
    'retainTempDir',
    # Go through the pipeline without running it; see pipeline.runConjunct.
    'dryRun',
])


def _expectMapping(data, key):
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f'"{key}" must be a mapping in the Conjunct config YAML file')
    return {str(k): '' if v is None else str(v) for (k, v) in value.items()}


def _expectList(data, key):
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigurationError(f'"{key}" must be a list in the Conjunct config YAML file')
    return [str(v) for v in value]


def _expandBinaryPath(path, what):
    # Symlinks are deliberately not expanded: clang++ is usually a
    # symlink to clang, but running it as clang changes the driver.
    try:
        return expandPath(str(path), False)
    except OSError as e:
        raise ConfigurationError(f'Failed to expand {what} path {path}: {e}') from e


def loadConfig(configFilePath, dryRun=False, retainTempDir=False):
    """Reads, parses and validates the YAML file at configFilePath."""
    try:
        with open(configFilePath, encoding='utf-8') as f:
            content = f.read()
    except OSError as e:
        raise ConfigurationError(f'Failed to read YAML file: {e}') from e
    if not content.strip():
        raise ConfigurationError('Empty YAML file')

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f'Failed to parse YAML file: {e}') from e
    if not isinstance(data, dict):
        raise ConfigurationError('Failed to parse YAML file: expected a mapping at the top level')

    seed = data.get('seed')
    if isinstance(seed, bool) or not isinstance(seed, int) or seed == 0:
        raise ConfigurationError('Missing seed in Conjunct config YAML file')

    clangPath = data.get('clang')
    if clangPath:
        clangPath = _expandBinaryPath(clangPath, 'clang')
        if os.path.isdir(clangPath):
            _logger.debug('clang directory is %s', clangPath)
        else:
            checkIfClangBinary(clangPath)
    else:
        clangPath = None

    optPath = data.get('opt')
    if not optPath:
        raise ConfigurationError('Missing opt in Conjunct config YAML file')
    optPath = _expandBinaryPath(optPath, 'opt')
    checkIfOptBinary(optPath)

    optArgs = []
    passes = _expectList(data, 'passes')
    if passes:
        optArgs.append(f'-passes={",".join(passes)}')
    optArgs.extend(_expectList(data, 'opt-args'))
    for (key, value) in _expectMapping(data, 'opt-extra-args').items():
        optArgs.append(f'{key}={value}')

    config = ConjunctConfig(seed=seed,
                            clangPath=clangPath,
                            optPath=optPath,
                            optArgs=tuple(optArgs),
                            optEnv=_expectMapping(data, 'opt-env'),
                            retainTempDir=retainTempDir,
                            dryRun=dryRun)
    _logger.debug('Parsed Conjunct config file successfully: %s', config)
    return config


def extractConfigFromArgs(args):
    """Strips conjunct's own flags from args and loads the configuration.

    Returns the pair (args, config); config is None when no
    '--conjunct-config-path' was given.  The returned args are
    what the real compiler should see.
    """
    _logger.debug('Parsing conjunct params...')

    dryRun = hasFlag(args, dryRunFlag)
    retainTempDir = hasFlag(args, retainTempDirFlag)
    args = removeAllFlags(args, dryRunFlag, False)
    args = removeAllFlags(args, retainTempDirFlag, False)

    if not hasFlag(args, configPathFlag):
        _logger.debug('Failed to find %s', configPathFlag)
        return (args, None)

    configFilePath = getFlagValue(args, configPathFlag)
    args = removeFlag(args, configPathFlag, True)
    if not configFilePath:
        raise ConfigurationError(f'{configPathFlag} needs a file')

    return (args, loadConfig(configFilePath, dryRun=dryRun, retainTempDir=retainTempDir))
