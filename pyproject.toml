[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "llpages"
version = "0.1.0"
description = "Thread-safe page bookkeeping: claimable bit masks, page tokens, page sizes and adrift markers."
requires-python = ">=3.10"
dependencies = []
keywords = ["allocator", "bitmask", "pages", "memory", "bookkeeping"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
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

[tool.hatch.build.targets.wheel]
packages = ["llpages"]

[tool.pytest.ini_options]
addopts = "-ra"
