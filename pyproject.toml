[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nucleikit"
version = "2.5.1"
description = "Template metadata, catalog, filtering, configuration and update tooling for a template-based vulnerability scanner"
requires-python = ">=3.10"
keywords = [
    "security",
    "scanner",
    "templates",
    "vulnerability",
    "severity",
    "yaml",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]
dependencies = [
    "pyyaml",
    "requests",
    "semver",
    "tabulate",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
nucleikit-functional-test = "nucleikit.functional:main"

[tool.hatch.build.targets.wheel]
packages = ["nucleikit"]

[tool.hatch.build.targets.sdist]
include = [
    "nucleikit",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
