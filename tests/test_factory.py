import os
import subprocess

import pytest

from deploykit.builders.base import (
    BuildOptions,
    UnsupportedProjectTypeError,
    ValidationError,
)
from deploykit.builders.factory import build_project, new_builder
from deploykit.builders.gradle import GradleBuilder
from deploykit.builders.maven import MavenBuilder
from deploykit.builders.npm import NPMBuilder
from deploykit.config import get_default_config
from deploykit.detector import DetectionError, ProjectType


class FakeRunner:
    def __init__(self, failing=()):
        self.calls = []
        self.failing = set(failing)

    def __call__(self, args, cwd=None, stdout=None, stderr=None, check=False):
        args = list(args)
        self.calls.append(args)
        program = os.path.basename(args[0])
        if program in self.failing:
            return subprocess.CompletedProcess(args, 1, stdout=b"")
        outputs = {
            "java": b'openjdk version "17.0.2"\n',
            "gradle": b"Gradle 8.5\n",
        }
        return subprocess.CompletedProcess(args, 0, stdout=outputs.get(program, b""))


def options_for(path, tmp_path):
    return BuildOptions(
        project_path=str(path), output_path=str(tmp_path / "out"), version="2.0.0"
    )


@pytest.mark.parametrize(
    "project_type, expected",
    [
        (ProjectType.NPM, NPMBuilder),
        (ProjectType.MAVEN, MavenBuilder),
        (ProjectType.GRADLE, GradleBuilder),
        ("maven", MavenBuilder),
    ],
)
def test_new_builder_picks_class(project_type, expected, tmp_path):
    config = get_default_config()
    options = options_for(tmp_path, tmp_path)
    builder = new_builder(project_type, config, options)
    assert type(builder) is expected
    assert builder.config is config
    assert builder.options is options


@pytest.mark.parametrize("project_type", [ProjectType.UNKNOWN, "python"])
def test_new_builder_rejects_unknown(project_type, tmp_path):
    with pytest.raises(UnsupportedProjectTypeError, match="不支持的项目类型"):
        new_builder(project_type, get_default_config(), options_for(tmp_path, tmp_path))


def test_build_project_undetectable(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(DetectionError):
        build_project(get_default_config(), options_for(empty, tmp_path))


def test_build_project_validation_failure(tmp_path, monkeypatch):
    project = tmp_path / "web"
    project.mkdir()
    (project / "package.json").write_text("{}")
    monkeypatch.setattr(subprocess, "run", FakeRunner(failing={"node"}))
    with pytest.raises(ValidationError, match="Node.js"):
        build_project(get_default_config(), options_for(project, tmp_path))


def test_build_project_gradle_end_to_end(tmp_path, monkeypatch):
    project = tmp_path / "svc"
    libs = project / "build" / "libs"
    libs.mkdir(parents=True)
    (project / "build.gradle").write_text("")
    (libs / "svc.jar").write_bytes(b"jar-bytes")
    runner = FakeRunner()
    monkeypatch.setattr(subprocess, "run", runner)
    config = get_default_config()
    config.project.name = "svc"
    result = build_project(config, options_for(project, tmp_path))
    assert result.success is True
    with open(result.artifact_path, "rb") as handle:
        assert handle.read() == b"jar-bytes"
    assert os.path.basename(result.artifact_path) == "svc-2.0.0.jar"
    assert ["gradle", "clean", "build"] in runner.calls