[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mapfplan"
version = "0.1.0"
description = "Building blocks for multi-agent path finding on 2D grids: heuristics, reservation tables, temporal networks, task assignment and rectangle reasoning."
requires-python = ">=3.10"
dependencies = []
keywords = ["mapf", "multi-agent", "path-finding", "planning", "grid", "stp", "vertex-cover"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mapfplan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
