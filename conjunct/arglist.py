import re

# These are the primitives used to rewrite a compiler command line.
#
# A command line is just a list of strings.  Order matters to the
# compiler driver and duplicates are legal, so nothing here ever
# reorders or deduplicates.  There is no notion of which flags take a
# value: a value is simply the element that follows its flag.  That
# means every operation that removes a flag has to be told whether to
# take the following element with it.
#
# None of these functions modify the list they are given; they all
# return a new one.


def _findFlag(args, flag):
    for (index, elem) in enumerate(args):
        if elem == flag:
            return index
    return -1


def removeFlag(args, flag, alsoRemoveValue=False):
    """Removes the first occurrence of flag, and its value if asked.

    e.g.  removeFlag(['-c', 'hello.c', '-o', 'hello'], '-c', True)
    gives ['-o', 'hello'].
    """
    retval = list(args)
    if not flag:
        return retval
    index = _findFlag(retval, flag)
    if index < 0:
        return retval
    end = index + 2 if alsoRemoveValue else index + 1
    del retval[index:end]
    return retval


def removeAllFlags(args, flag, alsoRemoveValue=False):
    """Removes every occurrence of flag, each one with its value if asked."""
    retval = list(args)
    if not flag:
        return retval
    while _findFlag(retval, flag) >= 0:
        retval = removeFlag(retval, flag, alsoRemoveValue)
    return retval


def removePattern(args, regex):
    """Removes every element that matches regex in its entirety.

    Values are not special cased: a value matching the pattern goes
    on its own, leaving its flag behind.
    """
    if not regex:
        return list(args)
    pattern = re.compile(regex)
    return [elem for elem in args if not pattern.fullmatch(elem)]


def addFlag(args, flag, value=''):
    """Appends flag, followed by value when there is one."""
    retval = list(args)
    if not flag:
        return retval
    retval.append(flag)
    if value:
        retval.append(value)
    return retval


def hasFlag(args, flag):
    if not args or not flag:
        return False
    return flag in args


def getFlagValue(args, flag):
    """Returns the element following the first occurrence of flag, or ''."""
    if not args or not flag:
        return ''
    index = _findFlag(args, flag)
    if index < 0 or index + 1 >= len(args):
        return ''
    return args[index + 1]
