"""Detection of the project type from the files in a directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from .utils import _base_name


class ProjectType(str, Enum):
    NPM = "npm"
    MAVEN = "maven"
    GRADLE = "gradle"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass
class ProjectInfo:
    type: ProjectType
    name: str
    version: str = ""
    build_command: str = ""
    artifact_path: str = ""


class DetectionError(Exception):
    """Raised when no known project type is found; carries a fallback info."""

    def __init__(self, message: str, info: ProjectInfo) -> None:
        super().__init__(message)
        self.info = info


def _is_missing(path: str) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return True
    except OSError:
        return False
    return False


def _stat_ok(path: str) -> bool:
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def _detect_npm(project_path: str) -> ProjectInfo | None:
    if _is_missing(os.path.join(project_path, "package.json")):
        return None
    return ProjectInfo(
        type=ProjectType.NPM,
        name=_base_name(project_path),
        build_command="npm run build",
        artifact_path="dist",
    )


def _detect_maven(project_path: str) -> ProjectInfo | None:
    if _is_missing(os.path.join(project_path, "pom.xml")):
        return None
    return ProjectInfo(
        type=ProjectType.MAVEN,
        name=_base_name(project_path),
        build_command="mvn clean package -DskipTests",
        artifact_path="target/*.jar",
    )


def _detect_gradle(project_path: str) -> ProjectInfo | None:
    if not is_gradle_project(project_path):
        return None
    return ProjectInfo(
        type=ProjectType.GRADLE,
        name=_base_name(project_path),
        build_command="./gradlew build",
        artifact_path="build/libs/*.jar",
    )


def detect_project(project_path: str = ".") -> ProjectInfo:
    """Detect the project type; NPM wins over Maven, Maven over Gradle."""
    project_path = os.fspath(project_path) or "."
    for detect in (_detect_npm, _detect_maven, _detect_gradle):
        info = detect(project_path)
        if info is not None:
            return info
    raise DetectionError(
        "无法识别项目类型",
        ProjectInfo(type=ProjectType.UNKNOWN, name=_base_name(project_path)),
    )


def is_npm_project(project_path: str) -> bool:
    return _stat_ok(os.path.join(project_path, "package.json"))


def is_maven_project(project_path: str) -> bool:
    return _stat_ok(os.path.join(project_path, "pom.xml"))


def is_gradle_project(project_path: str) -> bool:
    return _stat_ok(os.path.join(project_path, "build.gradle")) or _stat_ok(
        os.path.join(project_path, "build.gradle.kts")
    )