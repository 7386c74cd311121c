[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trancome"
version = "0.1.0"
description = "Command-line tool that sets up SQLite databases and users for personal financial control"
requires-python = ">=3.10"
keywords = ["finance", "budget", "sqlite", "cli", "users"]
classifiers = [
    "Development Status :: 2 - Pre-Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Accounting",
]
dependencies = [
    "click>=8.0",
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
trancome = "trancome.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["trancome"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
