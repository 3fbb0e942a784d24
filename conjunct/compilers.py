import logging
import os
import shutil

from .errors import ConfigurationError
from .popenwrapper import runCommand
from .sourcefile import SourceFileType

# Internal logger
_logger = logging.getLogger(__name__)

# Environmental variable naming the directory holding the real clang and
# clang++, used when no configuration file is given.
defaultClangDirEnv = 'CONJUNCT_DEFAULT_CLANG_DIR'

# When conjunct is installed in place of clang, the real clang is
# moved aside and given this suffix.
originalSuffix = '.original'


def getClangBinaryName(invokedAs, sourceType):
    """ Returns the name of the clang driver to run.

    If we were invoked as a clang (i.e. conjunct sits in for clang,
    clang++, clang-15, ...) that name is kept.  Otherwise the name
    is picked from the type of the source file.  clang and clang++
    are not interchangeable (clang++ links libstdc++ by default), and
    when in doubt clang++ is the one that copes with everything.
    """
    if invokedAs != 'conjunct' and invokedAs.startswith('clang'):
        return invokedAs
    if sourceType == SourceFileType.C:
        return 'clang'
    return 'clang++'


def preferOriginal(clangPath):
    original = f'{clangPath}{originalSuffix}'
    if os.path.exists(original):
        _logger.debug('Using %s instead of %s', original, clangPath)
        return original
    return clangPath


def findClang(clangPath, binaryName):
    """ Returns the path of the clang driver to invoke.

    clangPath is either the driver itself or a directory holding
    it, or None in which case the default clang directory, and
    then the PATH, is searched for binaryName.
    """
    if clangPath:
        if os.path.isdir(clangPath):
            return preferOriginal(os.path.join(clangPath, binaryName))
        return preferOriginal(clangPath)

    defaultDir = os.getenv(defaultClangDirEnv)
    if defaultDir:
        return preferOriginal(os.path.join(defaultDir, binaryName))

    found = shutil.which(binaryName)
    if found is None:
        errorMsg = f'Could not find {binaryName} in $PATH; set {defaultClangDirEnv} or use a configuration file'
        _logger.error(errorMsg)
        raise ConfigurationError(errorMsg)
    return found


def _checkVersionOutput(path, needle, what):
    try:
        (rc, output) = runCommand([path, '--version'])
    except OSError as e:
        raise ConfigurationError(f'Failed to run {path}: {e}') from e
    text = output.decode('utf-8', errors='replace')
    if rc != 0:
        raise ConfigurationError(f'Failed to run {path}: {text}')
    if needle not in text:
        raise ConfigurationError(f'Not {what} binary: {path}')
    return text


def checkIfClangBinary(path):
    return _checkVersionOutput(path, 'clang', 'a clang')


def checkIfOptBinary(path):
    return _checkVersionOutput(path, 'LLVM', 'an opt')
