[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "golens"
version = "0.1.0"
description = "Read and write the records of Go compiler object files: headers, symbols, relocations, aux records and data"
requires-python = ">=3.10"
dependencies = []
keywords = ["go", "object file", "goobj", "relocations", "symbols", "funcinfo"]
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
    "Topic :: Software Development :: Disassemblers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["golens"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
