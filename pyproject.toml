[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "esshell"
version = "0.9.2"
description = "Building blocks of the es extensible shell: terms, parse trees, lexing, tree rewriting, pattern matching, word splitting, formatting, variables and signals"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "es", "lexer", "glob", "pattern matching", "word splitting", "variables"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["esshell"]

[tool.hatch.build.targets.sdist]
include = ["esshell", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
