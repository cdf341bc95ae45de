[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emergekit"
version = "0.1.0"
description = "Ether unit conversion, SHA-256 hashing, JWT verification and clients for Futureverse, inventory and avatar services"
requires-python = ">=3.10"
keywords = ["ethereum", "wei", "jwt", "sha256", "nft", "inventory", "avatar", "futurepass"]
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
]
dependencies = [
    "pyjwt",
    "cryptography",
    "requests",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
    "pillow",
]

[tool.hatch.build.targets.wheel]
packages = ["emergekit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
