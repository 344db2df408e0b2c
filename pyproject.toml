[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "atserde"
version = "0.1.0"
description = "Serialize Python dataclasses into AT command strings and parse AT responses back into typed objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["at-commands", "modem", "serialization", "parsing", "dataclasses"]
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
packages = ["atserde"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
