[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deploykit"
version = "0.1.0"
description = "Command-line tool that detects, builds and packages NPM, Maven and Gradle projects"
requires-python = ">=3.10"
keywords = ["deploy", "build", "npm", "maven", "gradle", "packaging"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
deploy = "deploykit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["deploykit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
