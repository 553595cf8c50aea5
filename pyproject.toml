[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grokparse"
version = "0.1.0"
description = "Grok expression compiler and parser for turning unstructured text into typed fields"
requires-python = ">=3.10"
dependencies = [
    "regex",
]
keywords = ["grok", "logs", "parsing", "regex", "patterns", "ruby-hash"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Filters",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["grokparse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
