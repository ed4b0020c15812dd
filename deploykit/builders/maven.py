"""Builder for Maven projects: run the build and copy the main JAR."""

from __future__ import annotations

import os
import shutil
import time

from ..detector import ProjectType
from .base import (
    ArtifactNotFoundError,
    Builder,
    BuildFailedError,
    BuildResult,
    ValidationError,
    _probe,
    _project_directory,
    _stage,
    _walk,
    run_command,
)

_SECONDARY_JAR_MARKERS = ("sources", "javadoc", "tests")


def find_jar_files(directory: str) -> list[str]:
    """Return every path below directory whose name ends in .jar, in walk order."""
    return [path for path, _info in _walk(directory) if os.path.basename(path).endswith(".jar")]


def select_main_jar(jar_files: list[str]) -> str | None:
    """Prefer a JAR that is not a sources, javadoc or tests JAR; else the first."""
    for jar in jar_files:
        name = os.path.basename(jar)
        if not any(marker in name for marker in _SECONDARY_JAR_MARKERS):
            return jar
    return jar_files[0] if jar_files else None


class MavenBuilder(Builder):
    project_type = ProjectType.MAVEN

    def validate(self) -> None:
        self._check_java()

        output = _probe(["mvn", "--version"])
        if output is None:
            raise ValidationError("Maven 环境检查失败: Maven 未安装或不在 PATH 中")
        print(f"✓ Maven 版本: {output.split(chr(10))[0].strip()}")

        pom = os.path.join(self.options.project_path, "pom.xml")
        if not os.path.exists(pom):
            raise ValidationError(f"pom.xml 不存在: {pom}")

    def build(self) -> BuildResult:
        started = time.monotonic()
        print("🚀 开始构建 Maven 项目...")
        with _project_directory(self.options.project_path):
            with _stage("Maven 构建失败"):
                self._run_maven_build()
            with _stage("打包失败"):
                artifact_path, files, size = self._package_artifacts()
        return self._finish("Maven", started, artifact_path, files, size)

    def _run_maven_build(self) -> None:
        print("🔨 执行 Maven 构建...")
        command = self.config.java.build_command
        if not command:
            command = "mvn clean package -DskipTests" if self.options.skip_tests else "mvn clean package"
        run_command(command.split(), verbose=self.options.verbose)
        print("✓ Maven 构建完成")

    def _package_artifacts(self) -> tuple[str, list[str], int]:
        print("📦 查找并打包构建产物...")
        try:
            jar_files = find_jar_files("target")
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