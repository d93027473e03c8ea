[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbrp"
version = "0.1.0"
description = "Adaptive large neighbourhood search heuristic for the stochastic bike-sharing rebalancing problem"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "bike sharing",
    "rebalancing",
    "vehicle routing",
    "stochastic optimization",
    "alns",
    "heuristic",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sbrp = "sbrp.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sbrp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
