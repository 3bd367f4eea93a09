[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chipeight"
version = "0.1.0"
description = "A CHIP-8 interpreter with a step-by-step terminal debugger"
requires-python = ">=3.10"
keywords = ["chip-8", "emulator", "debugger", "interpreter", "curses"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chip-8 = "chipeight.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["chipeight"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
