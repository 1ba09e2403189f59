[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chwire"
version = "0.1.0"
description = "Building blocks for the ClickHouse native protocol: wire format, streams, compressed frames, blocks and packets"
requires-python = ">=3.10"
dependencies = [
    "lz4",
    "zstandard",
]
keywords = ["clickhouse", "database", "native protocol", "wire format", "lz4", "zstd", "cityhash"]
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
    "Topic :: Database :: Front-Ends",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chwire"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
