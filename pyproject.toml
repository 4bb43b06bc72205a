[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aemt"
version = "0.1.7"
description = "List, extract and patch files inside KKIIDDZZ.HED/DAT/BNS game archives"
requires-python = ">=3.10"
dependencies = []
keywords = ["archive", "kkiiddzz", "modding", "adpcm", "playstation"]
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
    "Topic :: System :: Archiving",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aemt = "aemt.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["aemt"]

[tool.pytest.ini_options]
addopts = "-ra"
