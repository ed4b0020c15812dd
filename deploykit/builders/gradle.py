"""Builder for Gradle projects: run the build and copy the main JAR."""

from __future__ import annotations

import os
import shutil
import time

from ..detector import ProjectType, is_gradle_project
from .base import (
    ArtifactNotFoundError,
    Builder,
    BuildFailedError,
    BuildResult,
    ValidationError,
    _probe,
    _project_directory,
    _stage,
    run_command,
)
from .maven import find_jar_files

_SECONDARY_JAR_MARKERS = ("sources", "javadoc", "tests", "plain")
_LIBS_DIR = os.path.join("build", "libs")


def select_main_jar(jar_files: list[str]) -> str | None:
    """Prefer a JAR that is not a sources, javadoc, tests or plain JAR; else the first."""
    for jar in jar_files:
        name = os.path.basename(jar)
        if not any(marker in name for marker in _SECONDARY_JAR_MARKERS):
            return jar
    return jar_files[0] if jar_files else None


def _report_gradle_version(output: str, origin: str) -> None:
    line = next((line for line in output.split("\n") if "Gradle" in line), None)
    if line is not None:
        print(f"✓ {line.strip()} ({origin})")


class GradleBuilder(Builder):
    project_type = ProjectType.GRADLE

    def gradle_command(self) -> str:
        """Return the project's gradlew if present, otherwise the system gradle."""
        gradlew = os.path.join(self.options.project_path, "gradlew")
        return gradlew if os.path.exists(gradlew) else "gradle"

    def validate(self) -> None:
        self._check_java()
        self._check_gradle()
        if not is_gradle_project(self.options.project_path):
            raise ValidationError("build.gradle 或 build.gradle.kts 不存在")

    def build(self) -> BuildResult:
        started = time.monotonic()
        print("🚀 开始构建 Gradle 项目...")
        with _project_directory(self.options.project_path):
            with _stage("Gradle 构建失败"):
                self._run_gradle_build()
            with _stage("打包失败"):
                artifact_path, files, size = self._package_artifacts()
        return self._finish("Gradle", started, artifact_path, files, size)

    def _check_gradle(self) -> None:
        project_path = self.options.project_path
        gradlew = os.path.join(project_path, "gradlew")
        if os.path.exists(gradlew):
            try:
                os.chmod(gradlew, 0o755)
            except OSError as exc:
                print(f"⚠️  设置 gradlew 执行权限失败: {exc}")
            output = _probe([gradlew, "--version"], cwd=project_path)
            if output is not None:
                _report_gradle_version(output, "使用项目 gradlew")
                return

        output = _probe(["gradle", "--version"])
        if output is None:
            raise ValidationError(
                "Gradle 环境检查失败: Gradle 未安装或不在 PATH 中，且项目没有可用的 gradlew"
            )
        _report_gradle_version(output, "使用系统 gradle")

    def _tasks(self) -> list[str]:
        tasks = ["clean", "build"]
        if self.options.skip_tests:
            tasks += ["-x", "test"]
        java = self.config.java
        if java.build_command and java.build_tool == "gradle":
            parts = java.build_command.split()
            if len(parts) > 1:
                tasks = parts[1:]
        return tasks

    def _run_gradle_build(self) -> None:
        print("🔨 执行 Gradle 构建...")
        run_command(
            [self.gradle_command(), *self._tasks()],
            cwd=self.options.project_path,
            verbose=self.options.verbose,
        )
        print("✓ Gradle 构建完成")

    def _package_artifacts(self) -> tuple[str, list[str], int]:
        print("📦 查找并打包构建产物...")
        try:
            jar_files = find_jar_files(_LIBS_DIR)
        except OSError as exc:
            raise BuildFailedError(f"查找 JAR 文件失败: {exc}") from exc
        if not jar_files:
            raise ArtifactNotFoundError("未找到 JAR 文件")
        main_jar = select_main_jar(jar_files)
        artifact_path = self._artifact_path(".jar")
        try:
            shutil.copyfile(main_jar, artifact_path)
        except OSError as exc:
            raise BuildFailedError(f"复制 JAR 文件失败: {exc}") from exc
        try:
            size = os.stat(artifact_path).st_size
        except OSError as exc:
            raise BuildFailedError(f"获取文件信息失败: {exc}") from exc
        print(f"✓ 打包完成: {artifact_path}")
        return artifact_path, [os.path.basename(artifact_path)], size