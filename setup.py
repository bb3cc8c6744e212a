#!/usr/bin/env python3
"""
Setup script for the Simple Database package.
"""

import re

from setuptools import setup, find_packages

# Read metadata from package without importing it
metadata = {}
with open("simple_database/__init__.py") as f:
    for key, value in re.findall(r'^(__\w+__) = "([^"]*)"', f.read(), re.MULTILINE):
        metadata[key] = value

# Read requirements
with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="simple-database",
    version=metadata["__version__"],
    author=metadata["__author__"],
    description="Connection pooling, transaction scoping and a fluent query builder for DB-API drivers",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        "mysql": ["PyMySQL>=1.1"],
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="database connection pool transaction sql sqlite postgresql mysql",
)
