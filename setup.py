"""
libhtpasswd setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
from setuptools import setup, find_packages
import sys

#=============================================================================
# init setup options
#=============================================================================
args = sys.argv[1:]

#=============================================================================
# version string
#=============================================================================

# pull version string from libhtpasswd
from libhtpasswd import __version__ as version

#=============================================================================
# static text
#=============================================================================
SUMMARY = "read, write & verify Apache htpasswd files"

DESCRIPTION = """\
libhtpasswd manages Apache-style htpasswd credential files: it loads the
``user:hash`` records into memory, adds, updates and deletes users, and writes
the file back atomically after every change.

Passwords can be hashed with the three schemes the ``htpasswd`` tool offers
everywhere: traditional DES ``crypt``, Apache's ``$apr1$`` MD5-crypt, and
``{SHA}``. All of them are implemented in pure python, so no ``crypt`` module
is required.
"""

KEYWORDS = """\
password hash security
crypt des-crypt apr1 md5-crypt sha1
apache htpasswd
"""

CLASSIFIERS = """\
Intended Audience :: Developers
License :: OSI Approved :: BSD License
Natural Language :: English
Operating System :: OS Independent
Programming Language :: Python :: 3
Programming Language :: Python :: Implementation :: CPython
Programming Language :: Python :: Implementation :: PyPy
Topic :: Security :: Cryptography
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
else:
    CLASSIFIERS.append("Development Status :: 5 - Production/Stable")

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, exclude=["tests", "tests.*"]),
    zip_safe=True,

    # metadata
    name="libhtpasswd",
    version=version,
    license="BSD",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    python_requires=">=3.9",
    install_requires=[
        "typing_extensions>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-archon>=0.0.6",
        ],
    },

    # extra opts
    script_args=args,
)

#=============================================================================
# eof
#=============================================================================
