[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cronkit"
version = "0.1.0"
description = "Cron-style task scheduling driven by explicit ticks, with seconds resolution and randomized schedules."
requires-python = ">=3.10"
dependencies = []
keywords = ["cron", "scheduler", "schedule", "tasks", "timer"]
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
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cronkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
