[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mobilekit"
version = "0.1.0"
description = "Helpers for mobile Rust project tooling: paths, versions, git checkouts, template packs, cargo commands and terminal reports"
requires-python = ">=3.11"
dependencies = []
keywords = ["mobile", "cargo", "rustc", "templates", "git", "build-tools"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mobilekit"]

[tool.pytest.ini_options]
addopts = "-ra"
