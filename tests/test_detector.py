import pytest

from deploykit.detector import (
    DetectionError,
    ProjectType,
    detect_project,
    is_gradle_project,
    is_maven_project,
    is_npm_project,
)


def _project(tmp_path, name, *files):
    root = tmp_path / name
    root.mkdir()
    for file_name in files:
        (root / file_name).write_text("")
    return root


def test_detect_npm(tmp_path):
    root = _project(tmp_path, "web", "package.json")
    info = detect_project(str(root))
    assert info.type is ProjectType.NPM
    assert info.name == "web"
    assert info.build_command == "npm run build"
    assert info.artifact_path == "dist"


def test_detect_maven(tmp_path):
    root = _project(tmp_path, "svc", "pom.xml")
    info = detect_project(str(root))
    assert info.type is ProjectType.MAVEN
    assert info.name == "svc"
    assert info.build_command == "mvn clean package -DskipTests"
    assert info.artifact_path == "target/*.jar"


@pytest.mark.parametrize("build_file", ["build.gradle", "build.gradle.kts"])
def test_detect_gradle(tmp_path, build_file):
    root = _project(tmp_path, "app", build_file)
    info = detect_project(str(root))
    assert info.type is ProjectType.GRADLE
    assert info.build_command == "./gradlew build"
    assert info.artifact_path == "build/libs/*.jar"


def test_npm_takes_priority(tmp_path):
    root = _project(tmp_path, "mixed", "package.json", "pom.xml", "build.gradle")
    assert detect_project(str(root)).type is ProjectType.NPM


def test_maven_over_gradle(tmp_path):
    root = _project(tmp_path, "mixed", "pom.xml", "build.gradle")
    assert detect_project(str(root)).type is ProjectType.MAVEN


def test_unknown_project_raises_with_info(tmp_path):
    root = _project(tmp_path, "empty")
    with pytest.raises(DetectionError) as excinfo:
        detect_project(str(root))
    assert excinfo.value.info.type is ProjectType.UNKNOWN
    assert excinfo.value.info.name == "empty"
    assert "无法识别项目类型" in str(excinfo.value)


def test_empty_path_means_cwd(tmp_path, monkeypatch):
    root = _project(tmp_path, "here", "pom.xml")
    monkeypatch.chdir(root)
    assert detect_project("").type is ProjectType.MAVEN


def test_is_checks(tmp_path):
    root = _project(tmp_path, "all", "package.json", "pom.xml", "build.gradle.kts")
    empty = _project(tmp_path, "none")
    assert is_npm_project(str(root)) and is_maven_project(str(root))
    assert is_gradle_project(str(root))
    assert not is_npm_project(str(empty))
    assert not is_maven_project(str(empty))
    assert not is_gradle_project(str(empty))


def test_project_type_string_values():
    assert str(ProjectType.MAVEN) == "maven"
    assert ProjectType("gradle") is ProjectType.GRADLE
    assert f"{ProjectType.NPM}" == "npm"