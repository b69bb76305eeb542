[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iotimer"
version = "1.0.0"
description = "I/O-free coroutines to drive and control a cycling timer over any byte stream"
requires-python = ">=3.10"
dependencies = []
keywords = ["io-free", "coroutine", "timer", "stream", "pomodoro"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
iotimer-demo = "iotimer.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["iotimer"]

[tool.hatch.build.targets.sdist]
include = ["iotimer", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
