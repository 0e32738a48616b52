[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tgrid"
version = "0.9.2"
description = "Terminal grid model: scrollback with reflow, keyboard selection, URL detection, box drawing and small helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["terminal", "emulator", "scrollback", "reflow", "box-drawing", "osc7", "farbfeld", "xresources"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Terminal Emulators/X Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tgrid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
