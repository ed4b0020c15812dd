"""Command-line interface: build, detect and init."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence

from .builders.base import BuildError, BuildOptions, BuildResult
from .builders.factory import build_project
from .config import (
    DEFAULT_CONFIG_FILE,
    Config,
    ConfigError,
    get_default_config,
    load_config,
    save_config,
)
from .detector import (
    DetectionError,
    ProjectInfo,
    ProjectType,
    detect_project,
    is_gradle_project,
    is_maven_project,
    is_npm_project,
)
from .utils import (
    dir_exists,
    file_exists,
    format_file_size,
    get_project_name,
    print_error,
    print_info,
    print_success,
    print_warning,
)

_EXPLICIT_TYPES = {
    "npm": ProjectType.NPM,
    "maven": ProjectType.MAVEN,
    "gradle": ProjectType.GRADLE,
}

_SUGGESTIONS = {
    ProjectType.NPM: "deploy build --type=npm",
    ProjectType.MAVEN: "deploy build --type=maven",
    ProjectType.GRADLE: "deploy build --type=gradle",
}


class CommandError(Exception):
    """Raised when a command cannot carry out its work."""


def _resolve_project_path(args: argparse.Namespace) -> str:
    """Pick the positional path over --path, check it and make it absolute."""
    path = args.paths[0] if args.paths else args.path
    if not dir_exists(path):
        raise CommandError(f"项目路径不存在: {path}")
    try:
        return os.path.abspath(path)
    except OSError as exc:
        raise CommandError(f"获取项目绝对路径失败: {exc}") from exc


def load_cli_config(config_file: str = "") -> Config:
    """Load the configuration named on the command line, or deploy.yaml."""
    config_path = config_file or DEFAULT_CONFIG_FILE
    if not file_exists(config_path):
        raise ConfigError(f"配置文件不存在: {config_path}")
    return load_config(config_path)


def run_build(args: argparse.Namespace) -> BuildResult:
    """Build the project and report the artifact."""
    print("🚀 开始构建项目...")
    project_path = _resolve_project_path(args)

    try:
        cfg = load_cli_config(args.config)
    except ConfigError as exc:
        print_warning(f"加载配置失败，使用默认配置: {exc}")
        cfg = get_default_config()

    if cfg.project.name in ("", "my-app"):
        cfg.project.name = get_project_name(project_path)

    if args.type == "auto":
        try:
            info = detect_project(project_path)
        except DetectionError as exc:
            raise CommandError(f"自动检测项目类型失败: {exc}") from exc
        print(f"🔍 检测到项目类型: {info.type}")
    else:
        project_type = _EXPLICIT_TYPES.get(args.type)
        if project_type is None:
            raise CommandError(f"不支持的项目类型: {args.type}")
        print(f"📋 使用指定项目类型: {project_type}")

    options = BuildOptions(
        project_path=project_path,
        environment="build",
        output_path=args.output,
        version=args.build_version,
        verbose=args.verbose,
        skip_tests=args.skip_tests,
    )

    try:
        result = build_project(cfg, options)
    except (BuildError, DetectionError) as exc:
        print_error(f"构建失败: {exc}")
        raise

    if not result.success:
        print_error(f"构建失败: {result.message}")
        raise CommandError("构建失败")

    print_success("构建完成!")
    print(f"📦 构建产物: {result.artifact_path}")
    print(f"📊 文件大小: {format_file_size(result.size)}")
    print(f"⏱️  构建耗时: {result.build_time}")
    if result.files:
        print(f"📁 包含文件: {len(result.files)} 个")
    return result


def run_detect(args: argparse.Namespace) -> ProjectInfo:
    """Detect and describe the project type."""
    print("🔍 检测项目类型...")
    project_path = _resolve_project_path(args)
    print(f"📁 项目路径: {project_path}")

    try:
        info = detect_project(project_path)
    except DetectionError as exc:
        print_error(f"检测失败: {exc}")
        raise

    print_success(f"检测到项目类型: {info.type}")
    print(f"📋 项目名称: {info.name}")
    if info.build_command:
        print(f"🔨 默认构建命令: {info.build_command}")
    if info.artifact_path:
        print(f"📦 构建产物路径: {info.artifact_path}")

    print("\n📊 详细检测信息:")
    if is_npm_project(project_path):
        print("  ✓ 发现 package.json - NPM 项目")
    if is_maven_project(project_path):
        print("  ✓ 发现 pom.xml - Maven 项目")
    if is_gradle_project(project_path):
        print("  ✓ 发现 build.gradle - Gradle 项目")

    print("\n💡 构建建议:")
    print(f"  使用命令: {_SUGGESTIONS.get(info.type, 'deploy build (自动检测)')}")
    return info


def run_init(args: argparse.Namespace) -> str:
    """Write deploy.yaml for the project and return its path."""
    print("🚀 初始化配置文件...")
    project_path = _resolve_project_path(args)
    print(f"📁 项目路径: {project_path}")

    config_path = os.path.join(project_path, DEFAULT_CONFIG_FILE)
    if file_exists(config_path) and not args.force:
        raise CommandError(f"配置文件已存在: {config_path}\n使用 --force 参数强制覆盖")

    print("🔍 检测项目类型...")
    try:
        info = detect_project(project_path)
    except DetectionError as exc:
        print_warning(f"无法检测项目类型: {exc}")
        print_info("将使用默认配置")
        info = exc.info
    else:
        print_success(f"检测到项目类型: {info.type}")

    cfg = get_default_config()
    cfg.project.name = info.name
    cfg.project.type = str(info.type)
    if info.type is ProjectType.NPM:
        print("📦 配置 NPM 项目设置...")
    elif info.type is ProjectType.MAVEN:
        print("☕ 配置 Maven 项目设置...")
        cfg.java.build_tool = "maven"
    elif info.type is ProjectType.GRADLE:
        print("🐘 配置 Gradle 项目设置...")
        cfg.java.build_tool = "gradle"
        cfg.java.build_command = "./gradlew clean build"

    print("💾 保存配置文件...")
    try:
        save_config(cfg, config_path)
    except ConfigError as exc:
        raise CommandError(f"保存配置文件失败: {exc}") from exc
    print_success(f"配置文件已创建: {config_path}")

    print("\n📋 配置摘要:")
    print(f"  项目名称: {cfg.project.name}")
    print(f"  项目类型: {cfg.project.type}")
    if cfg.project.type in ("npm", "auto"):
        print(f"  NPM 构建命令: {cfg.npm.build_command}")
        print(f"  NPM 构建目录: {cfg.npm.build_dir}")
    if cfg.project.type in ("maven", "gradle", "auto"):
        print(f"  Java 构建工具: {cfg.java.build_tool}")
        print(f"  Java 构建命令: {cfg.java.build_command}")

    print("\n💡 下一步:")
    print("  1. 编辑 deploy.yaml 文件以自定义配置")
    print("  2. 运行 'deploy detect' 验证项目检测")
    print("  3. 运行 'deploy build' 开始构建项目")
    return config_path


def _global_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS if suppress else "",
        help="配置文件路径 (默认为 deploy.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="显示详细输出",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deploy",
        description="一个用于 NPM 和 Java 项目的部署工具",
        epilog=(
            "使用示例：\n"
            "  deploy build                    # 自动检测并构建项目\n"
            "  deploy build --type=npm         # 指定构建 NPM 项目\n"
            "  deploy build --type=maven       # 指定构建 Maven 项目\n"
            "  deploy detect                   # 检测项目类型"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _global_options(parser, suppress=False)

    common = argparse.ArgumentParser(add_help=False)
    _global_options(common, suppress=True)

    commands = parser.add_subparsers(dest="command")

    build = commands.add_parser("build", parents=[common], help="构建项目")
    build.add_argument("paths", nargs="*", metavar="项目路径")
    build.add_argument("-t", "--type", default="auto", help="项目类型 (npm, maven, gradle, auto)")
    build.add_argument("-o", "--output", default="", help="输出目录 (默认为 ./build)")
    build.add_argument("--version", dest="build_version", default="", help="版本号 (默认为时间戳)")
    build.add_argument("--skip-tests", action="store_true", help="跳过测试")
    build.add_argument("-p", "--path", default=".", help="项目路径")
    build.set_defaults(handler=run_build)

    detect = commands.add_parser("detect", parents=[common], help="检测项目类型")
    detect.add_argument("paths", nargs="*", metavar="项目路径")
    detect.add_argument("-p", "--path", default=".", help="项目路径")
    detect.set_defaults(handler=run_detect)

    init = commands.add_parser("init", parents=[common], help="初始化配置文件")
    init.add_argument("paths", nargs="*", metavar="项目路径")
    init.add_argument("-p", "--path", default=".", help="项目路径")
    init.add_argument("-f", "--force", action="store_true", help="强制覆盖已存在的配置文件")
    init.set_defaults(handler=run_init)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the deploy command line and return the exit status."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return 0 if exc.code in (0, None) else 1

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0

    if args.config:
        print(f"使用配置文件: {args.config}")
    try:
        handler(args)
    except (CommandError, BuildError, DetectionError, ConfigError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())