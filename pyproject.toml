[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "napoleonchess"
version = "1.0.0"
description = "Bitboard chess position model: move encoding, FEN parsing, attack tables, make/undo and static exchange evaluation"
requires-python = ">=3.10"
dependencies = []
keywords = ["chess", "bitboard", "fen", "epd", "san", "static exchange evaluation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["napoleonchess"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
