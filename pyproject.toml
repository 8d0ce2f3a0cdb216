[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lanxfer"
version = "0.1.0"
description = "Send files and directory trees between machines on a local network over a simple TCP protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["file transfer", "lan", "tcp", "send", "receive"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: File Sharing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lanxfer = "lanxfer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lanxfer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
