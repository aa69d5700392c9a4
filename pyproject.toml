[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "x360make"
version = "0.1.0"
description = "Build-tool helpers: JSON translation tables, a size-rotating background file logger and a guarded multi-threaded ZIP extractor"
requires-python = ">=3.10"
dependencies = []
keywords = ["localization", "translation", "logging", "log-rotation", "zip", "extraction", "build"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Localization",
    "Topic :: System :: Logging",
    "Topic :: System :: Archiving :: Compression",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["x360make"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
