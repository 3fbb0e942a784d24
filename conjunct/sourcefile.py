""" A static class that allows the language of a translation unit to be checked.
"""
import os

from .arglist import getFlagValue

class SourceFileType:
    """ Groks the language of a source file from its extension.
    """

    # These are just here to keep pylint happy.
    UNKNOWN = None
    C = None
    CPP = None
    OBJC = None

    # Provides int -> str map
    revMap = {}

    # Provides extension -> int map
    extensionMap = {}

    @classmethod
    def getFileType(cls, fileName):
        """ Returns the type of a source file, judged by its extension only.
        """
        (_, ext) = os.path.splitext(fileName)
        return cls.extensionMap.get(ext, cls.UNKNOWN)

    @classmethod
    def getFileTypeString(cls, fti):
        """ Returns the string name of the file type.

        """
        if fti in cls.revMap:
            return cls.revMap[fti]
        return 'UNKNOWN'

    @classmethod
    def init(cls):
        """ Initializes the static fields.
        """
        for (index, name) in enumerate(('UNKNOWN',
                                        'C',
                                        'CPP',
                                        'OBJC')):
            setattr(cls, name, index)
            cls.revMap[index] = name

        for ext in ('.c',):
            cls.extensionMap[ext] = cls.C
        for ext in ('.cpp', '.cc', '.cxx', '.c++'):
            cls.extensionMap[ext] = cls.CPP
        for ext in ('.m',):
            cls.extensionMap[ext] = cls.OBJC

# Initialise SourceFileType static class
SourceFileType.init()


def classifySource(args):
    """ Returns the pair (name, type) of the translation unit in args.

    Compilers are under no obligation to put the source file right
    after -c, but that is what they usually do, so that is tried
    first.  Failing that, the first argument with a known source
    extension is taken.  If both fail the result is ('', UNKNOWN).
    """
    sourceFileName = getFlagValue(args, '-c')
    if sourceFileName:
        sourceFileName = os.path.basename(sourceFileName)
        return (sourceFileName, SourceFileType.getFileType(sourceFileName))

    for arg in args:
        arg = os.path.basename(arg)
        fileType = SourceFileType.getFileType(arg)
        if fileType != SourceFileType.UNKNOWN:
            return (arg, fileType)

    return ('', SourceFileType.UNKNOWN)
