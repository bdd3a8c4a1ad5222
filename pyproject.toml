[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minirel"
version = "0.1.0"
description = "Storage layer of a small relational engine: paged files, a clock buffer pool, catalog records, join helpers and sample data"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "buffer pool", "paged storage", "clock replacement", "join", "catalog"]
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
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
minirel-datagen = "minirel.datagen:main"
minirel-dbdestroy = "minirel.dbdestroy:main"

[tool.hatch.build.targets.wheel]
packages = ["minirel"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
