"""Detect, build and package NPM, Maven and Gradle projects."""

__version__ = "0.1.0"