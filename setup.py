#!/usr/bin/env python

import setuptools
import toml

"""
Minimal version of setup.py to allow setuptools based editable installs
(python setup.py develop) during development.

Poetry uses pyproject.toml so doesn't require a setup.py, pip reads
pyproject.toml and builds with poetry-core.
"""

if __name__ == "__main__":
    with open('pyproject.toml', 'r') as f:
        pyproject = toml.load(f)

    poetry = pyproject['tool']['poetry']
    name = poetry['name']
    version = poetry['version']
    packages = ['musiccast_control']
    install_requires = [
        dep for dep, spec in poetry['dependencies'].items()
        if dep != 'python' and not (isinstance(spec, dict) and spec.get('optional'))
    ]

    setuptools.setup(
        name=name, packages=packages, version=version, install_requires=install_requires
    )
