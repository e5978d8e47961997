[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "domhedge"
version = "0.1.0"
description = "Futures market data, copy-trading lookups and trader records for paired-position hedging"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = [
    "futures",
    "hedging",
    "klines",
    "market-data",
    "copy-trading",
    "binance",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["domhedge"]

[tool.hatch.build.targets.sdist]
include = [
    "domhedge",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
