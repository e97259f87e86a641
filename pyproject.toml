[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yule"
version = "0.1.0"
description = "Building blocks for a verified local model runtime: BLAKE3 Merkle roots, Ed25519 key storage, a GGUF model registry and cache, inference settings and sandbox policies"
requires-python = ">=3.10"
keywords = [
    "llm",
    "gguf",
    "merkle",
    "blake3",
    "ed25519",
    "sandbox",
    "seccomp",
    "model-registry",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Security :: Cryptography",
    "Framework :: AsyncIO",
]
dependencies = [
    "cryptography>=41",
    "httpx>=0.25",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[tool.hatch.build.targets.wheel]
packages = ["yule"]

[tool.hatch.build.targets.sdist]
include = ["yule", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
