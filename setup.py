from setuptools import setup, find_packages

from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

# use the in house version number so we stay in synch with ourselves.
from conjunct.version import conjunct_version

setup(
    name='conjunct',
    version=conjunct_version,
    description='Run LLVM opt passes on every object file of a build',
    long_description=long_description,
    url='https://github.com/afjoseph/conjunct',
    author='afjoseph',


    include_package_data=True,

    packages=find_packages(exclude=['test', 'test.*']),

    python_requires='>=3.8',

    install_requires=[
        'PyYAML',
    ],

    extras_require={
        'test': ['pytest'],
    },

    entry_points = {
        'console_scripts': [
            'conjunct = conjunct.conjunct:main',
            'conjunct-sanity-checker = conjunct.sanity:main',
        ],
    },

    license='MIT',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Natural Language :: English',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Compilers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: MacOS',
        'Operating System :: POSIX :: Linux',
        'Operating System :: POSIX :: BSD',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
)
