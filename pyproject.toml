[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kate"
version = "0.1.0"
description = "Building blocks for HTTP services: handler chains, middlewares, rotating log files, a line log formatter, date helpers and a small model/condition layer for SQL."
requires-python = ">=3.10"
dependencies = [
    "cachetools",
]
keywords = ["http", "middleware", "framework", "logging", "orm", "sql"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["kate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
