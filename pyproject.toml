[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sdfrender"
version = "0.1.0"
description = "Tile-based 2D and 3D rasterization of implicit surfaces (signed distance fields)"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "sdf",
    "signed distance field",
    "implicit surface",
    "rasterization",
    "interval arithmetic",
    "rendering",
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
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sdfrender"]

[tool.hatch.build.targets.sdist]
include = [
    "sdfrender",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
