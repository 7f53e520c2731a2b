[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "feegate"
version = "0.1.0"
description = "Global minimum-fee rules for transaction admission, with bech32 address prefix conversion"
requires-python = ">=3.10"
dependencies = []
keywords = ["fees", "gas", "bech32", "transactions", "validation"]
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
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
feegate = "feegate.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["feegate"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
