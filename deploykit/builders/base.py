"""Shared build types, errors and helpers for the project builders."""

from __future__ import annotations

import os
import stat
import subprocess
import time
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from typing import ClassVar

from ..config import Config
from ..detector import ProjectType
from ..utils import generate_version

DEFAULT_OUTPUT_DIR = "./build"


class BuildError(Exception):
    """Base class for build errors; may carry the failed BuildResult."""

    default_message = "构建失败"

    def __init__(self, message: str | None = None, result: BuildResult | None = None) -> None:
        super().__init__(message or self.default_message)
        self.result = result


class UnsupportedProjectTypeError(BuildError):
    default_message = "不支持的项目类型"


class BuildFailedError(BuildError):
    default_message = "构建失败"


class ValidationError(BuildError):
    default_message = "构建环境验证失败"


class ArtifactNotFoundError(BuildError):
    default_message = "构建产物未找到"


@dataclass
class BuildResult:
    success: bool = False
    artifact_path: str = ""
    version: str = ""
    build_time: str = ""
    files: list[str] = field(default_factory=list)
    size: int = 0
    message: str = ""


@dataclass
class BuildOptions:
    project_path: str
    environment: str = ""
    output_path: str = ""
    version: str = ""
    verbose: bool = False
    skip_tests: bool = False


def run_command(
    args: Sequence[str], cwd: str | os.PathLike | None = None, verbose: bool = False
) -> None:
    """Run a command, showing its output only when verbose; raise on failure."""
    args = list(args)
    if not args:
        raise BuildFailedError("执行命令失败: 空命令")
    command_line = " ".join(args)
    sink = None if verbose else subprocess.DEVNULL
    try:
        completed = subprocess.run(args, cwd=cwd, stdout=sink, stderr=sink, check=False)
    except FileNotFoundError as exc:
        raise BuildFailedError(
            f'执行 {command_line} 失败: exec: "{args[0]}": executable file not found in $PATH'
        ) from exc
    except OSError as exc:
        raise BuildFailedError(f"执行 {command_line} 失败: {exc}") from exc
    code = completed.returncode
    if code > 0:
        raise BuildFailedError(f"执行 {command_line} 失败: exit status {code}")
    if code < 0:
        raise BuildFailedError(f"执行 {command_line} 失败: signal: {-code}")


def _probe(
    args: Sequence[str], cwd: str | os.PathLike | None = None, combined: bool = False
) -> str | None:
    """Run a command and return its output, or None if it could not succeed."""
    try:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if combined else subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return None
    if completed.returncode != 0:
        return None
    return completed.stdout.decode("utf-8", "replace")


def _walk(root: str) -> Iterator[tuple[str, os.stat_result]]:
    """Yield (path, lstat) for root and everything below it in lexical order."""
    info = os.lstat(root)
    yield root, info
    if stat.S_ISDIR(info.st_mode):
        for name in sorted(os.listdir(root)):
            yield from _walk(os.path.join(root, name))


def _trim_fraction(whole: int, fraction: int, digits: int) -> str:
    text = f"{whole}.{fraction:0{digits}d}".rstrip("0").rstrip(".")
    return text


def _format_duration(seconds: float) -> str:
    """Format an elapsed time like 1.5s, 250ms or 1h2m3s."""
    ns = round(seconds * 1_000_000_000)
    if ns <= 0:
        return "0s"
    if ns < 1_000:
        return f"{ns}ns"
    if ns < 1_000_000:
        return _trim_fraction(ns // 1_000, ns % 1_000, 3) + "µs"
    if ns < 1_000_000_000:
        return _trim_fraction(ns // 1_000_000, ns % 1_000_000, 6) + "ms"
    hours, rest = divmod(ns, 3_600_000_000_000)
    minutes, rest = divmod(rest, 60_000_000_000)
    secs = _trim_fraction(rest // 1_000_000_000, rest % 1_000_000_000, 9) + "s"
    if hours:
        return f"{hours}h{minutes}m{secs}"
    if minutes:
        return f"{minutes}m{secs}"
    return secs


@contextmanager
def _project_directory(path: str) -> Iterator[None]:
    """Temporarily change the working directory to the project."""
    try:
        original = os.getcwd()
    except OSError as exc:
        raise BuildError(f"获取当前目录失败: {exc}") from exc
    try:
        os.chdir(path)
    except OSError as exc:
        raise BuildError(f"切换到项目目录失败: {exc}") from exc
    try:
        yield
    finally:
        with suppress(OSError):
            os.chdir(original)


@contextmanager
def _stage(label: str) -> Iterator[None]:
    """Attach a failed BuildResult labelled with the stage to any BuildError."""
    try:
        yield
    except BuildError as exc:
        exc.result = BuildResult(success=False, message=f"{label}: {exc}")
        raise


class Builder(ABC):
    """A builder for one kind of project."""

    project_type: ClassVar[ProjectType] = ProjectType.UNKNOWN

    def __init__(self, config: Config, options: BuildOptions) -> None:
        self.config = config
        self.options = options

    @abstractmethod
    def build(self) -> BuildResult:
        """Build the project and package its artifact."""

    @abstractmethod
    def validate(self) -> None:
        """Check that the build environment is usable; raise ValidationError if not."""

    def _check_java(self) -> None:
        output = _probe(["java", "-version"], combined=True)
        if output is None:
            raise ValidationError("Java 环境检查失败: Java 未安装或不在 PATH 中")
        print(f"✓ Java 版本: {output.split(chr(10))[0].strip()}")
        if self.config.java.java_version:
            print(f"  要求版本: {self.config.java.java_version}")

    def _artifact_path(self, suffix: str) -> str:
        """Create the output directory and return the artifact path inside it."""
        output_dir = self.options.output_path or DEFAULT_OUTPUT_DIR
        try:
            os.makedirs(output_dir, mode=0o755, exist_ok=True)
        except OSError as exc:
            raise BuildFailedError(f"创建输出目录失败: {exc}") from exc
        version = self.options.version or generate_version()
        name = f"{self.config.project.name}-{version}{suffix}"
        return os.path.normpath(os.path.join(output_dir, name))

    def _finish(
        self, label: str, started: float, artifact_path: str, files: list[str], size: int
    ) -> BuildResult:
        elapsed = _format_duration(time.monotonic() - started)
        print(f"✅ {label} 项目构建完成，耗时: {elapsed}")
        print(f"📦 构建产物: {artifact_path} ({size / (1024 * 1024):.2f} MB)")
        return BuildResult(
            success=True,
            artifact_path=artifact_path,
            version=self.options.version,
            build_time=elapsed,
            files=files,
            size=size,
            message="构建成功",
        )