[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fmods"
version = "0.1.0"
description = "Command-line mod manager for Factorio instances"
requires-python = ">=3.11"
keywords = ["factorio", "mods", "mod-manager", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "requests",
    "platformdirs",
    "tomli-w",
    "termcolor",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
fmods = "fmods.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["fmods"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
