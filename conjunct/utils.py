import errno
import os


def expandPath(path, expandSymlinks):
    """ Returns path as an absolute path.

    Expands '~' and environment variables, then makes the path
    absolute.  Symlinks are only resolved when expandSymlinks is
    set: clang++ is often a symlink to clang, and resolving it
    would change how the driver behaves.

    Raises OSError if the directory holding path does not exist.
    """
    expanded = os.path.expandvars(os.path.expanduser(path))
    if expandSymlinks:
        retval = os.path.realpath(expanded)
    else:
        retval = os.path.abspath(expanded)
    parent = os.path.dirname(retval)
    if not os.path.isdir(parent):
        raise OSError(errno.ENOENT, f'failed to expand path {path}', parent)
    return retval


def getBasenameWithoutExtension(path):
    (root, _) = os.path.splitext(os.path.basename(path))
    return root
