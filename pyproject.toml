[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fadungeon"
version = "0.1.0"
description = "Procedural dungeon level generation with room separation, spanning-tree corridors and tileset mapping"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "dungeon",
    "procedural-generation",
    "roguelike",
    "level-generation",
    "tileset",
    "minimum-spanning-tree",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fadungeon = "fadungeon.levelgen:main"

[tool.hatch.build.targets.wheel]
packages = ["fadungeon"]

[tool.hatch.build.targets.sdist]
include = ["fadungeon", "tests", "pyproject.toml", "README.md"]

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
check_untyped_defs = true
