[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "simplebank"
version = "0.1.0"
description = "A small banking service: accounts, ledger entries and money transfers over SQLite with a JSON HTTP API."
requires-python = ">=3.10"
keywords = ["bank", "accounts", "transfers", "ledger", "sqlite", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: Flask",
    "Topic :: Office/Business :: Financial :: Accounting",
]
dependencies = [
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["simplebank"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
