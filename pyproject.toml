[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sohamchess"
version = "0.1.0"
description = "A small chess engine with move generation, alpha-beta search and a UCI front end"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "engine", "uci", "perft", "alpha-beta", "board-game"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sohamchess = "sohamchess.uci:main"
sohamchess-perft = "sohamchess.perftsuite:main"
sohamchess-mates = "sohamchess.matesuite:main"

[tool.hatch.build.targets.wheel]
packages = ["sohamchess"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
