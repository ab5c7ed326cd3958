[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "isotiles"
version = "0.1.0"
description = "Isometric tile levels, sprite catalogs and placeable objects for 2D games"
requires-python = ">=3.10"
dependencies = []
keywords = ["isometric", "tiles", "level editor", "sprites", "game"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["isotiles"]

[tool.pytest.ini_options]
addopts = "-ra"
