[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "subclient"
version = "0.1.0"
description = "An asynchronous client for Substrate-based chains: JSON-RPC queries, SCALE encoding, V14 metadata, storage keys and extrinsics"
requires-python = ">=3.10"
keywords = ["substrate", "blockchain", "scale", "json-rpc", "extrinsic", "metadata"]
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
    "Framework :: AsyncIO",
    "Topic :: Software Development :: Libraries",
]
dependencies = [
    "httpx",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[tool.hatch.build.targets.wheel]
packages = ["subclient"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
