#!/usr/bin/env python
"""
gitrelease
==========
.. code:: shell
  $ gitrelease php/php-src
  $ gitrelease php/php-src --version-prefix 8.2
  $ gitrelease --provider gitlab gitlab-org/gitlab-runner
"""

import io
import os
import re

from setuptools import find_packages, setup

_version_re = re.compile(r"__version__\s=\s\"(.*)\"")


install_requires = [
    "requests>=2.16.0",
    "semver>=3.0.0",
    "appdirs",
    "python-dateutil",
    "PyYAML",
]
tests_requires = [
    "pytest>=4.4.0",
    "flake8",
    "flake8-bugbear",
    "pytest-xdist",
    "pytest-cov",
]

with io.open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

base_dir = os.path.join(os.path.dirname(__file__), "src")

with open(os.path.join(base_dir, "gitrelease", "__about__.py"), "r", encoding="utf-8") as f:
    version = _version_re.search(f.read()).group(1)

setup(
    name="gitrelease",
    version=version,
    description="A CLI tool to find the latest release tag of a GitHub, GitLab or Bitbucket repository",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    zip_safe=False,
    license="BSD",
    install_requires=install_requires,
    extras_require={
        "tests": install_requires + tests_requires,
    },
    tests_require=tests_requires,
    include_package_data=True,
    entry_points={"console_scripts": ["gitrelease = gitrelease.cli:main"]},
    classifiers=[
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Operating System :: OS Independent",
        "Topic :: Software Development",
        "Topic :: Software Development :: Version Control",
        "Topic :: Utilities",
        "License :: OSI Approved :: BSD License",
        "Environment :: Console",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    keywords="version, release, tag, latest, semver, github, gitlab, bitbucket",
)
