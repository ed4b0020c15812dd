"""Choosing a builder for a project and running a whole build."""

from __future__ import annotations

from ..config import Config
from ..detector import ProjectType, detect_project
from .base import Builder, BuildOptions, BuildResult, UnsupportedProjectTypeError
from .gradle import GradleBuilder
from .maven import MavenBuilder
from .npm import NPMBuilder

_BUILDERS: dict[ProjectType, type[Builder]] = {
    ProjectType.NPM: NPMBuilder,
    ProjectType.MAVEN: MavenBuilder,
    ProjectType.GRADLE: GradleBuilder,
}


def new_builder(project_type: ProjectType | str, config: Config, options: BuildOptions) -> Builder:
    """Return the builder for project_type; raise UnsupportedProjectTypeError otherwise."""
    try:
        builder_class = _BUILDERS[ProjectType(project_type)]
    except (KeyError, ValueError):
        raise UnsupportedProjectTypeError() from None
    return builder_class(config, options)


def build_project(config: Config, options: BuildOptions) -> BuildResult:
    """Detect the project type, validate the environment and build."""
    info = detect_project(options.project_path)
    builder = new_builder(info.type, config, options)
    builder.validate()
    return builder.build()