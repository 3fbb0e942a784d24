""" The exceptions raised by conjunct.

Every one of them carries the exit code the conjunct
process should terminate with, so the entry point never
has to substitute a generic failure code.
"""

# Used when the failure is ours rather than a child process's.
INTERNAL_ERROR_EXIT_CODE = 1


def exitCodeFor(returncode):
    """ Maps a child's return code to the one conjunct exits with.

    A child killed by signal N has returncode -N; like a shell,
    conjunct reports that as 128 + N.
    """
    if returncode is None:
        return INTERNAL_ERROR_EXIT_CODE
    if returncode < 0:
        return 128 - returncode
    return returncode


class ConjunctError(Exception):
    exitCode = INTERNAL_ERROR_EXIT_CODE


class ConfigurationError(ConjunctError):
    """ The configuration file or its binaries are unusable. """


class WorkspaceError(ConjunctError):
    """ The temporary directory or one of its files could not be made. """


class MissingOutputError(ConjunctError):
    """ The object file cannot be rebuilt without a -o destination. """


class StageError(ConjunctError):
    """ A clang or opt invocation failed.

    The combined output of the failing process is kept in output
    so that it can be shown to the user.
    """

    def __init__(self, stage, cmd, returncode, output=b''):
        self.stage = stage
        self.cmd = cmd
        self.returncode = returncode
        self.output = output
        if returncode:
            self.exitCode = exitCodeFor(returncode)
        super(StageError, self).__init__(f'{stage} failed: {self.outputText()}')

    def outputText(self):
        if isinstance(self.output, bytes):
            return self.output.decode('utf-8', errors='replace')
        return str(self.output)
