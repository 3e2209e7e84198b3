[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ajutil"
version = "0.1.0"
description = "Small utilities: checked integer arithmetic, hashing helpers, offset-tracking I/O, length-prefixed data and fan-out."
requires-python = ">=3.10"
dependencies = []
keywords = ["integer overflow", "hashing", "offset tracking", "varint", "length prefix", "fanout"]
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

[project.scripts]
ajutil-buildinfo = "ajutil.buildinfo:main"

[tool.hatch.build.targets.wheel]
packages = ["ajutil"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
