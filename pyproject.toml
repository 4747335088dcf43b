[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vellum"
version = "0.1.0"
description = "Building blocks for finite state transducers: packed integer encoding, merge iteration, and Levenshtein and regular expression automata over UTF-8 bytes."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "fst",
    "finite state transducer",
    "automaton",
    "levenshtein",
    "fuzzy search",
    "regular expression",
    "dfa",
    "utf-8",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Indexing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vellum"]

[tool.hatch.build.targets.sdist]
include = ["vellum", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
