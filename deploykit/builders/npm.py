"""Builder for NPM projects: install, build and pack the output as tar.gz."""

from __future__ import annotations

import os
import tarfile
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


def package_directory(build_dir: str, artifact_path: str) -> tuple[list[str], int]:
    """Pack everything below build_dir into a gzip tarball.

    Returns the relative paths added, in walk order, and the archive size.
    """
    try:
        handle = open(artifact_path, "wb")
    except OSError as exc:
        raise BuildFailedError(f"创建压缩文件失败: {exc}") from exc
    files: list[str] = []
    with handle, tarfile.open(fileobj=handle, mode="w:gz") as archive:
        try:
            for path, _info in _walk(build_dir):
                rel_path = os.path.relpath(path, build_dir)
                if rel_path == ".":
                    continue
                files.append(rel_path)
                archive.add(path, arcname=rel_path, recursive=False)
        except OSError as exc:
            raise BuildFailedError(f"打包文件失败: {exc}") from exc
    return files, os.path.getsize(artifact_path)


class NPMBuilder(Builder):
    project_type = ProjectType.NPM

    def validate(self) -> None:
        output = _probe(["node", "--version"])
        if output is None:
            raise ValidationError("Node.js 环境检查失败: Node.js 未安装或不在 PATH 中")
        print(f"✓ Node.js 版本: {output.strip()}")
        if self.config.npm.node_version:
            print(f"  要求版本: {self.config.npm.node_version}")

        output = _probe(["npm", "--version"])
        if output is None:
            raise ValidationError("npm 环境检查失败: npm 未安装或不在 PATH 中")
        print(f"✓ npm 版本: {output.strip()}")

        package_json = os.path.join(self.options.project_path, "package.json")
        if not os.path.exists(package_json):
            raise ValidationError(f"package.json 不存在: {package_json}")

    def build(self) -> BuildResult:
        started = time.monotonic()
        print("🚀 开始构建 NPM 项目...")
        with _project_directory(self.options.project_path):
            with _stage("安装依赖失败"):
                self._install_dependencies()
            with _stage("构建失败"):
                self._run_build()
            with _stage("打包失败"):
                artifact_path, files, size = self._package_artifacts()
        return self._finish("NPM", started, artifact_path, files, size)

    def _install_dependencies(self) -> None:
        print("📦 安装依赖...")
        command = self.config.npm.install_command or "npm ci"
        run_command(command.split(), verbose=self.options.verbose)
        print("✓ 依赖安装完成")

    def _run_build(self) -> None:
        print("🔨 执行构建...")
        command = self.config.npm.build_command or "npm run build"
        run_command(command.split(), verbose=self.options.verbose)
        print("✓ 构建完成")

    def _package_artifacts(self) -> tuple[str, list[str], int]:
        print("📦 打包构建产物...")
        build_dir = self.config.npm.build_dir or "dist"
        if not os.path.exists(build_dir):
            raise ArtifactNotFoundError(f"构建目录不存在: {build_dir}")
        artifact_path = self._artifact_path(".tar.gz")
        files, size = package_directory(build_dir, artifact_path)
        print(f"✓ 打包完成: {artifact_path}")
        return artifact_path, files, size