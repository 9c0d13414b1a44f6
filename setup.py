# -*- coding: utf-8 -*-
#
"""setuptools-based setup.py for condstack.

Tested on Python 3.8.

Usage as usual with setuptools:
    python3 setup.py build
    python3 setup.py sdist
    python3 setup.py bdist_wheel
    python3 setup.py install

or, for development:
    pip install -e .[test]
"""

import ast
import os

from setuptools import setup  # type: ignore[import]


def read(*relpath, **kwargs):  # https://blog.ionelmc.ro/2014/05/25/python-packaging/#the-setup-script
    with open(os.path.join(os.path.dirname(__file__), *relpath),
              encoding=kwargs.get('encoding', 'utf8')) as fh:
        return fh.read()

# Extract __version__ from the package __init__.py
# (since it's not a good idea to actually run __init__.py during the build process).
init_py_path = os.path.join("condstack", "__init__.py")
version = None
try:
    with open(init_py_path) as f:
        for line in f:
            if line.startswith("__version__"):
                module = ast.parse(line, filename=init_py_path)
                expr = module.body[0]
                assert isinstance(expr, ast.Assign)
                v = expr.value
                assert isinstance(v, ast.Constant)
                version = v.value
                break
except FileNotFoundError:
    pass
if not version:
    raise RuntimeError(f"Version information not found in {init_py_path}")

#########################################################
# Call setup()
#########################################################

setup(
    name="condstack",
    version=version,
    # The unit tests in `condstack.tests` are NOT deployed.
    packages=["condstack"],
    provides=["condstack"],
    keywords=["conditions", "restarts", "handlers", "finalizers", "unwind-protect",
              "error-handling", "non-local-exit", "lisp", "common-lisp"],
    install_requires=[],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.8",
    description="A Lisp-style condition system: named conditions, handlers, finalizers and restarts.",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    license="BSD",
    platforms=["Linux"],
    classifiers=["Development Status :: 4 - Beta",
                 "Intended Audience :: Developers",
                 "License :: OSI Approved :: BSD License",
                 "Operating System :: POSIX :: Linux",
                 "Programming Language :: Python",
                 "Programming Language :: Python :: 3",
                 "Programming Language :: Python :: Implementation :: CPython",
                 "Programming Language :: Python :: Implementation :: PyPy",
                 "Topic :: Software Development :: Libraries",
                 "Topic :: Software Development :: Libraries :: Python Modules"
                 ],
    zip_safe=True
)
