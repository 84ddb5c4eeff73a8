[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "commlib"
version = "0.1.0"
description = "Common utilities: strings, hashing, CSV splitting, synchronisation, PE section tables, binary command logs, filesystem and INI helpers, and file logging."
requires-python = ">=3.10"
dependencies = []
keywords = ["utilities", "csv", "hash", "pe", "logging", "filesystem", "ini", "code-page"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["commlib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
