""" The conjunct pipeline.

For a compile-only invocation ('-c' present) the object file is
built in three stages instead of one:

  1. emitBitcode():    clang emits LLVM bitcode for the translation unit.
  2. schedulePasses(): opt runs the configured passes over that bitcode.
  3. buildBitcode():   clang turns the transformed bitcode into the
                       object file the build asked for.

Nothing is linked here: build systems link in a separate step, and that
step goes straight through to clang.

Each stage derives its own command line from the original one, through
the pure *Args() functions below, and never from another stage's.
The two bitcode files live in a temporary directory that is removed
when the pipeline finishes, however it finishes, unless the
configuration asks for it to be retained.
"""
import logging
import os
import shutil
import tempfile

from .arglist import addFlag, getFlagValue, hasFlag, removeAllFlags, removeFlag, removePattern
from .compilers import findClang, getClangBinaryName
from .errors import (INTERNAL_ERROR_EXIT_CODE, ConjunctError, MissingOutputError,
                     StageError, WorkspaceError, exitCodeFor)
from .logconfig import informUser
from .popenwrapper import echoOutput, runCommand
from .sourcefile import SourceFileType, classifySource
from .utils import expandPath, getBasenameWithoutExtension

# Internal logger
_logger = logging.getLogger(__name__)

# Flags that upset opt when they end up in the bitcode.  Each of them
# stands alone (takes no value) and may be injected more than once by
# the toolchain (Xcode passes -fembed-bitcode twice).
bitcodeForbiddenFlags = ('-g', '-gmodules', '-fembed-bitcode', '-fembed-bitcode-marker')

# The passes must not see sanitizer instrumentation, so sanitizers are
# dropped while emitting bitcode.  They are kept for the final build so
# the passes are still tested against them.
sanitizerPattern = r'-fsanitize=[\w-]+(,[\w-]+)*'

# The stages pass flags that are irrelevant to what they do; don't let
# clang fail the build over it.
unusedArgumentFlag = '-Wno-unused-command-line-argument'

# Used to name the bitcode files when the source file cannot be found.
unknownSourceName = 'translation-unit'


class Workspace:
    """ The temporary directory holding one run's bitcode files.

    Use it as a context manager: the directory is created on entry
    and removed on exit, unless retain is set.
    """

    def __init__(self, retain=False):
        self.retain = retain
        self.path = None

    def __enter__(self):
        try:
            self.path = tempfile.mkdtemp(prefix='conjunct')
        except OSError as e:
            raise WorkspaceError(f'while creating temp dir: {e}') from e
        _logger.debug('Created temp dir %s', self.path)
        return self

    def __exit__(self, excType, excValue, traceback):
        if self.retain:
            informUser(f'conjunct: retaining temp dir {self.path}\n')
        else:
            _logger.debug('Removing temp dir %s', self.path)
            shutil.rmtree(self.path, ignore_errors=True)
        return False

    def createFile(self, name):
        """ Creates an empty file called name and returns its absolute path. """
        path = os.path.join(self.path, name)
        try:
            with open(path, 'wb'):
                pass
            return expandPath(path, True)
        except OSError as e:
            raise WorkspaceError(f'while creating temp file {path}: {e}') from e


def _runStage(stage, cmd, dryRun, runner, env=None):
    _logger.debug('%s: %s', stage, cmd)
    if dryRun:
        _logger.debug('Dry-run: not running above command')
        return b''
    try:
        (rc, output) = runner(cmd, env=env)
    except OSError as e:
        raise StageError(stage, cmd, None, str(e).encode()) from e
    if rc != 0:
        raise StageError(stage, cmd, rc, output)
    _logger.debug('%s output:\n%s', stage, output.decode('utf-8', errors='replace'))
    return output


def emitBitcodeArgs(args, bitcodePath):
    retval = list(args)
    for flag in bitcodeForbiddenFlags:
        retval = removeAllFlags(retval, flag, False)
    retval = removeFlag(retval, '-o', True)
    retval = removePattern(retval, sanitizerPattern)
    retval = addFlag(retval, '-emit-llvm')
    retval = addFlag(retval, '-o', bitcodePath)
    retval = addFlag(retval, unusedArgumentFlag)
    return retval


def emitBitcode(sourceName, clangPath, args, workspace, dryRun=False, runner=runCommand):
    """ Stage one: emits the bitcode of sourceName and returns its path. """
    bitcodePath = workspace.createFile(f'{sourceName}.bc')
    cmd = [clangPath] + emitBitcodeArgs(args, bitcodePath)
    _logger.info('Emitting bitcode for %s', sourceName)
    _runStage('emitting bitcode', cmd, dryRun, runner)
    if not dryRun:
        _logger.info('Bitcode generated in %s', bitcodePath)
    return bitcodePath


def schedulePassesArgs(cfg, inputPath, outputPath):
    return list(cfg.optArgs) + [inputPath, '-o', outputPath]


def optEnvironment(cfg):
    """ The environment opt runs in: ours, plus the configured extras. """
    env = os.environ.copy()
    env.update(cfg.optEnv)
    return env


def schedulePasses(sourceName, cfg, inputPath, workspace, dryRun=False, runner=runCommand):
    """ Stage two: runs opt over inputPath and returns the transformed bitcode's path. """
    baseName = getBasenameWithoutExtension(inputPath)
    outputPath = workspace.createFile(f'{baseName}.opt.bc')
    cmd = [cfg.optPath] + schedulePassesArgs(cfg, inputPath, outputPath)
    _logger.debug('Running opt on %s @ %s -> %s', sourceName, inputPath, outputPath)
    _runStage('running opt', cmd, dryRun, runner, env=optEnvironment(cfg))
    if not dryRun:
        _logger.info('Opt ran successfully')
    return outputPath


def buildBitcodeArgs(args, bitcodePath):
    retval = removeFlag(args, '-x', True)
    retval = addFlag(retval, '-x', 'ir')
    retval = removeFlag(retval, '-c', True)
    retval = addFlag(retval, '-c', bitcodePath)
    retval = addFlag(retval, unusedArgumentFlag)
    return retval


def buildBitcode(clangPath, bitcodePath, args, dryRun=False, runner=runCommand):
    """ Stage three: builds the object file from bitcodePath and returns its path. """
    buildArgs = buildBitcodeArgs(args, bitcodePath)
    outputPath = getFlagValue(buildArgs, '-o')
    if not outputPath:
        raise MissingOutputError('missing -o argument')
    cmd = [clangPath] + buildArgs
    _logger.debug('Building bitcode %s to an object file', bitcodePath)
    _runStage('building bitcode', cmd, dryRun, runner)
    if not dryRun:
        _logger.info('Successfully built bitcode for %s at %s', bitcodePath, outputPath)
    return outputPath


def runOriginalClang(clangPath, args, runner=runCommand):
    """ Runs clang on args untouched and returns its exit code. """
    _logger.debug('Running original clang...')
    try:
        (rc, output) = runner([clangPath] + list(args))
    except OSError as e:
        _logger.error('failed to run original clang %s: %s', clangPath, e)
        return INTERNAL_ERROR_EXIT_CODE
    echoOutput(output)
    if rc != 0:
        _logger.debug('original clang returned %d', rc)
    return exitCodeFor(rc)


def runConjunct(cfg, clangPath, args, runner=runCommand):
    """ Runs the three stages on a compile-only invocation.

    Returns the path of the object file.  Raises a ConjunctError
    subclass if any stage fails, in which case the later stages are
    not run.

    In a dry run the three stages only compute their command lines
    and files; clang is then run once on the original arguments so
    that the build still gets its object file.
    """
    _logger.debug('Config: %s, args: %s', cfg, args)
    (sourceName, sourceType) = classifySource(args)
    if not sourceName:
        _logger.warning('Could not find the source file in %s', args)
        sourceName = unknownSourceName
    else:
        _logger.debug('%s is %s', sourceName, SourceFileType.getFileTypeString(sourceType))

    with Workspace(cfg.retainTempDir) as workspace:
        bitcodePath = emitBitcode(sourceName, clangPath, args, workspace, cfg.dryRun, runner)
        optBitcodePath = schedulePasses(sourceName, cfg, bitcodePath, workspace, cfg.dryRun, runner)
        outputPath = buildBitcode(clangPath, optBitcodePath, args, cfg.dryRun, runner)

        if cfg.dryRun:
            _logger.debug('Running original clang during dry-run...')
            cmd = [clangPath] + list(args)
            _runStage('running original clang during dry-run', cmd, False, runner)

    _logger.info('Conjunct ran successfully on %s', sourceName)
    return outputPath


def classifyAndMaybeRun(args, cfg, invokedAs='conjunct', runner=runCommand):
    """ The entry point to the pipeline; returns conjunct's exit code.

    Anything that is not a compile-only step (linking, preprocessing,
    queries) goes straight to clang, and clang's exit code is ours.
    """
    try:
        (_, sourceType) = classifySource(args)
        clangPath = findClang(cfg.clangPath, getClangBinaryName(invokedAs, sourceType))

        if not hasFlag(args, '-c'):
            _logger.debug('Not an object compilation step: using Clang instead')
            return runOriginalClang(clangPath, args, runner)

        runConjunct(cfg, clangPath, args, runner)
    except StageError as e:
        _logger.error('%s failed (%s):\n%s', e.stage, e.returncode, e.outputText())
        return e.exitCode
    except ConjunctError as e:
        _logger.error('%s', e)
        return e.exitCode
    return 0
