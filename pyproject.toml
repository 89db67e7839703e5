[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tplayer"
version = "0.1.0"
description = "Terminal music player that browses album folders and plays them in order"
requires-python = ">=3.10"
keywords = ["music", "player", "terminal", "curses", "audio", "playlist"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tplayer = "tplayer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tplayer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
