[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kaffeepause"
version = "0.1.0"
description = "Simulated coffee vending machine components (valves, touch screen, thermoblock, environment, start-up sequencing) on a virtual clock"
requires-python = ">=3.10"
dependencies = []
keywords = ["coffee", "vending machine", "simulation", "virtual clock"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kaffeepause"]

[tool.pytest.ini_options]
addopts = "-ra"
