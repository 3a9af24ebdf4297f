#!/usr/bin/env python

# Usage:
#  $ pip install .
#  $ pip install -e ".[test]"

from setuptools import setup, find_packages


# util function to get version information from file with __version__=
def get_version(filename):
    try:
        with open(filename, "r") as f:
            for line in f:
                if line.startswith("__version__"):
                    # extract the version string and strip it
                    return line.split('"')[1].strip().strip('"').strip("'")
    except FileNotFoundError:
        print(f"Cannot get version information from {filename}")


setup(
    name="geoscaling",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    version=get_version("./src/geoscaling/_version.py"),
    description="Non-dimensionalisation of geodynamic material parameters",
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pint",
        "scipy",
        "sympy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
