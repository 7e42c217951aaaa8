[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "backuptool"
version = "0.1.0"
description = "Building blocks for content-addressed, deduplicating backup archives with named channels and revisions"
requires-python = ">=3.10"
dependencies = []
keywords = ["backup", "archive", "deduplication", "bzip2", "sha256", "manifest"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Backup",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["backuptool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
