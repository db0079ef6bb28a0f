[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dvmodem"
version = "0.1.0"
description = "Fixed-point building blocks for a D-Star and FM repeater modem: D-Star framing and header FEC, CTCSS, Morse keyer, FM tones, timers and ring buffers."
requires-python = ">=3.10"
dependencies = []
keywords = ["ham radio", "d-star", "fm", "ctcss", "morse", "modem", "dsp", "repeater"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Ham Radio",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dvmodem"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
