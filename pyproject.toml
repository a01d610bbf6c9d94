[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sampletools"
version = "0.1.0"
description = "Q8_0 quantised dot-product helpers, an aiohttp websocket chat handler, safe streamed uploads and a small task command"
requires-python = ">=3.10"
keywords = ["aiohttp", "websocket", "chat", "upload", "quantization", "dot-product"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
    "Framework :: aiohttp",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "aiohttp>=3.9",
    "numpy>=1.24",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
sampletools-xtask = "sampletools.xtask:main"

[tool.hatch.build.targets.wheel]
packages = ["sampletools"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
