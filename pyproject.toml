[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "weatherservice"
version = "0.1.0"
description = "Daily weather forecast API handler backed by Open-Meteo with a DynamoDB cache"
requires-python = ">=3.10"
dependencies = []
keywords = ["weather", "forecast", "open-meteo", "dynamodb", "api-gateway", "cache"]
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
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["weatherservice"]

[tool.hatch.build.targets.sdist]
include = ["weatherservice", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
