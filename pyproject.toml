[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kvraft"
version = "0.1.0"
description = "Building blocks for a Raft-backed key-value store: a skip list, a command type, a blocking queue, a small RPC layer and common utilities"
requires-python = ">=3.10"
dependencies = []
keywords = ["raft", "key-value", "skiplist", "rpc", "distributed"]
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
    "Topic :: System :: Distributed Computing",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kvraft"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
