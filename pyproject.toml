[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lynxcore"
version = "0.1.0"
description = "Hardware models of a handheld console: memory map, Mikey timers, audio channels and serial link"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "lynx", "timers", "audio", "uart", "hardware model"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lynxcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
