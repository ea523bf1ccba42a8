[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xiu"
version = "0.1.0"
description = "Byte buffers, FLV demuxing and muxing, and MPEG-TS muxing for live streaming media"
requires-python = ">=3.11"
dependencies = []
keywords = [
    "flv",
    "mpeg-ts",
    "aac",
    "adts",
    "h264",
    "annexb",
    "streaming",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video :: Conversion",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["xiu"]

[tool.hatch.build.targets.sdist]
include = ["xiu", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
