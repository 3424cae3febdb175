[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "armcore"
version = "0.1.0"
description = "Control, checksum and device-monitoring building blocks for a six-joint robot arm controller"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "robotics",
    "pid",
    "fuzzy-pid",
    "crc",
    "can",
    "servo",
    "ring-buffer",
    "usb-descriptors",
    "remote-control",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["armcore"]

[tool.hatch.build.targets.sdist]
include = [
    "armcore",
    "tests",
    "README.md",
    "pyproject.toml",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
