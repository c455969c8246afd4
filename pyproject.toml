[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wilsonsearch"
version = "0.3.0"
description = "Search ranges of primes for Wilson primes and near-Wilson primes"
requires-python = ">=3.10"
dependencies = []
keywords = ["wilson prime", "wilson quotient", "number theory", "primes", "factorial"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wilsonsearch = "wilsonsearch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["wilsonsearch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
