import os
import sys

import pytest

from deploykit.builders.base import ArtifactNotFoundError, BuildFailedError, BuildOptions, ValidationError
from deploykit.builders.maven import MavenBuilder, find_jar_files, select_main_jar
from deploykit.config import get_default_config
from deploykit.detector import ProjectType


def _project(tmp_path, script):
    project = tmp_path / "svc"
    project.mkdir()
    (project / "pom.xml").write_text("<project/>")
    (project / "make_jar.py").write_text(script)
    config = get_default_config()
    config.project.name = "svc"
    config.java.build_command = f"{sys.executable} make_jar.py"
    return project, config


JAR_SCRIPT = (
    "import os\n"
    "os.makedirs('target', exist_ok=True)\n"
    "open('target/app-1.0-sources.jar', 'wb').write(b'sources')\n"
    "open('target/app-1.0.jar', 'wb').write(b'main-jar')\n"
)


def test_select_main_jar_prefers_plain():
    assert select_main_jar(["app-sources.jar", "app-javadoc.jar", "app.jar"]) == "app.jar"


def test_select_main_jar_falls_back_to_first():
    jars = ["app-tests.jar", "app-sources.jar"]
    assert select_main_jar(jars) == "app-tests.jar"


def test_select_main_jar_checks_basename_only():
    path = os.path.join("tests", "app.jar")
    assert select_main_jar([path]) == path


def test_select_main_jar_empty():
    assert select_main_jar([]) is None


def test_find_jar_files(tmp_path):
    (tmp_path / "lib").mkdir()
    (tmp_path / "b.jar").write_text("b")
    (tmp_path / "lib" / "a.jar").write_text("a")
    (tmp_path / "notes.txt").write_text("n")
    found = find_jar_files(str(tmp_path))
    assert found == [str(tmp_path / "b.jar"), str(tmp_path / "lib" / "a.jar")]


def test_find_jar_files_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_jar_files(str(tmp_path / "target"))


def test_builder_type(tmp_path):
    builder = MavenBuilder(get_default_config(), BuildOptions(project_path=str(tmp_path)))
    assert builder.project_type is ProjectType.MAVEN
    assert builder.project_type.value == "maven"


def test_build_copies_main_jar(tmp_path):
    project, config = _project(tmp_path, JAR_SCRIPT)
    out = tmp_path / "out"
    before = os.getcwd()
    options = BuildOptions(project_path=str(project), output_path=str(out), version="9")
    result = MavenBuilder(config, options).build()
    assert os.getcwd() == before
    assert result.success is True
    assert result.files == ["svc-9.jar"]
    assert (out / "svc-9.jar").read_bytes() == b"main-jar"
    assert result.size == len(b"main-jar")


def test_build_command_failure(tmp_path):
    project, config = _project(tmp_path, "import sys\nsys.exit(1)\n")
    with pytest.raises(BuildFailedError) as info:
        MavenBuilder(config, BuildOptions(project_path=str(project))).build()
    assert info.value.result.message.startswith("Maven 构建失败")


def test_build_without_jars(tmp_path):
    project, config = _project(tmp_path, "import os\nos.makedirs('target', exist_ok=True)\n")
    with pytest.raises(ArtifactNotFoundError) as info:
        MavenBuilder(config, BuildOptions(project_path=str(project))).build()
    assert info.value.result.success is False


def test_validate_without_java(tmp_path, monkeypatch):
    empty = tmp_path / "bin"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    with pytest.raises(ValidationError) as info:
        MavenBuilder(get_default_config(), BuildOptions(project_path=str(tmp_path))).validate()
    assert "Java" in str(info.value)