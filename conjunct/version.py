# Feeping Creaturism:
#
# this is the all important version number used by pip.
#
#
"""
Version History:

0.1.0    - 10/5/2023 first working pipeline: emit bitcode, run opt, rebuild the object.

0.1.1    - 10/6/2023 don't expand symlinks for clang or opt; clang++ is not just clang.

0.2.0    - 3/2/2024 -Wno-unused-command-line-argument added to every stage we derive.
           sanitizer flags are dropped while emitting bitcode but kept for the rebuild.

0.2.1    - 3/8/2024 clang may now be a directory; the right clang or clang++ is picked
           from the source file type, and a '.original' sibling wins if it exists.

0.3.0    - 10/19/2026 --conjunct-dry-run always produces a real object file.
           flags injected twice (-fembed-bitcode) are removed however often they appear.
           --conjunct-version so that --version goes through to clang.

"""

conjunct_version = '0.3.0'
conjunct_date = 'October 19 2026'
