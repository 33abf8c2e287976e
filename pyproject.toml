[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "multy"
version = "0.1.0"
description = "Cloud-agnostic model of infrastructure resources with reference resolution, implicit resource groups and validation"
requires-python = ">=3.10"
dependencies = []
keywords = ["cloud", "infrastructure", "multi-cloud", "aws", "azure", "gcp", "validation"]
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
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["multy"]

[tool.pytest.ini_options]
addopts = "-ra"
