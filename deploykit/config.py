"""Configuration model and YAML loading/saving for deploy.yaml."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

import yaml

DEFAULT_CONFIG_FILE = "deploy.yaml"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read, parsed or written."""


_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False", ""}


def _fields(value: Any, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"解析配置文件失败: {key} 应为映射")
    return {str(k).lower(): v for k, v in value.items()}


def _str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    raise ConfigError(f"解析配置文件失败: {key} 应为字符串")


def _int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        if value == "":
            return 0
        try:
            return int(value, 0)
        except ValueError:
            pass
    raise ConfigError(f"解析配置文件失败: {key} 应为整数")


def _bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, (bool, int, float)):
        return bool(value)
    if isinstance(value, str):
        if value in _TRUE_WORDS:
            return True
        if value in _FALSE_WORDS:
            return False
    raise ConfigError(f"解析配置文件失败: {key} 应为布尔值")


def _str_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_str(item, key) for item in value]
    return [_str(value, key)]


def _str_map(value: Any, key: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"解析配置文件失败: {key} 应为映射")
    return {str(k): _str(v, key) for k, v in value.items()}


@dataclass
class ProjectConfig:
    name: str = ""
    type: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ProjectConfig:
        d = _fields(data, "project")
        return cls(name=_str(d.get("name"), "name"), type=_str(d.get("type"), "type"))


@dataclass
class NPMConfig:
    build_command: str = ""
    build_dir: str = ""
    install_command: str = ""
    node_version: str = ""
    default_start_command: str = ""
    default_stop_command: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> NPMConfig:
        d = _fields(data, "npm")
        return cls(**{name: _str(d.get(name), name) for name in cls.__dataclass_fields__})


@dataclass
class HeapSize:
    min: str = ""
    max: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> HeapSize:
        d = _fields(data, "heap_size")
        return cls(min=_str(d.get("min"), "min"), max=_str(d.get("max"), "max"))


@dataclass
class JavaRuntime:
    heap_size: HeapSize = field(default_factory=HeapSize)
    jvm_options: list[str] = field(default_factory=list)
    app_options: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> JavaRuntime:
        d = _fields(data, "runtime")
        return cls(
            heap_size=HeapSize.from_dict(d.get("heap_size")),
            jvm_options=_str_list(d.get("jvm_options"), "jvm_options"),
            app_options=_str_list(d.get("app_options"), "app_options"),
        )


@dataclass
class JavaConfig:
    build_tool: str = ""
    build_command: str = ""
    artifact_path: str = ""
    java_version: str = ""
    runtime: JavaRuntime = field(default_factory=JavaRuntime)
    default_start_command: str = ""
    default_stop_command: str = ""
    default_status_command: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> JavaConfig:
        d = _fields(data, "java")
        values: dict[str, Any] = {
            name: _str(d.get(name), name)
            for name in cls.__dataclass_fields__
            if name != "runtime"
        }
        return cls(runtime=JavaRuntime.from_dict(d.get("runtime")), **values)


@dataclass
class GlobalScriptConfig:
    timeout: int = 0
    shell: str = ""
    working_dir: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> GlobalScriptConfig:
        d = _fields(data, "global")
        return cls(
            timeout=_int(d.get("timeout"), "timeout"),
            shell=_str(d.get("shell"), "shell"),
            working_dir=_str(d.get("working_dir"), "working_dir"),
        )


@dataclass
class ScriptsConfig:
    global_config: GlobalScriptConfig = field(default_factory=GlobalScriptConfig)
    custom: dict[str, str] = field(default_factory=dict)
    hooks: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ScriptsConfig:
        d = _fields(data, "scripts")
        return cls(
            global_config=GlobalScriptConfig.from_dict(d.get("global")),
            custom=_str_map(d.get("custom"), "custom"),
            hooks=_str_map(d.get("hooks"), "hooks"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "global": asdict(self.global_config),
            "custom": dict(self.custom),
            "hooks": dict(self.hooks),
        }


@dataclass
class ServerConfig:
    host: str = ""
    user: str = ""
    port: int = 0
    key_file: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ServerConfig:
        d = _fields(data, "servers")
        return cls(
            host=_str(d.get("host"), "host"),
            user=_str(d.get("user"), "user"),
            port=_int(d.get("port"), "port"),
            key_file=_str(d.get("key_file"), "key_file"),
        )


@dataclass
class EnvironmentScripts:
    deploy: str = ""
    variables: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> EnvironmentScripts:
        d = _fields(data, "scripts")
        return cls(
            deploy=_str(d.get("deploy"), "deploy"),
            variables=_str_map(d.get("variables"), "variables"),
        )


@dataclass
class EnvironmentConfig:
    servers: list[ServerConfig] = field(default_factory=list)
    deploy_path: str = ""
    service_name: str = ""
    service_port: int = 0
    health_check_url: str = ""
    scripts: EnvironmentScripts = field(default_factory=EnvironmentScripts)
    java: JavaConfig | None = None

    @classmethod
    def from_dict(cls, data: Any) -> EnvironmentConfig:
        d = _fields(data, "environments")
        servers = d.get("servers")
        if servers is None:
            servers = []
        elif not isinstance(servers, (list, tuple)):
            raise ConfigError("解析配置文件失败: servers 应为列表")
        java = d.get("java")
        return cls(
            servers=[ServerConfig.from_dict(item) for item in servers],
            deploy_path=_str(d.get("deploy_path"), "deploy_path"),
            service_name=_str(d.get("service_name"), "service_name"),
            service_port=_int(d.get("service_port"), "service_port"),
            health_check_url=_str(d.get("health_check_url"), "health_check_url"),
            scripts=EnvironmentScripts.from_dict(d.get("scripts")),
            java=None if java is None else JavaConfig.from_dict(java),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.java is None:
            del data["java"]
        return data


@dataclass
class DeployConfig:
    backup_count: int = 0
    timeout: int = 0
    restart_delay: int = 0
    health_check_timeout: int = 0
    use_scripts: bool = False
    fallback_to_default: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> DeployConfig:
        d = _fields(data, "deploy")
        return cls(
            backup_count=_int(d.get("backup_count"), "backup_count"),
            timeout=_int(d.get("timeout"), "timeout"),
            restart_delay=_int(d.get("restart_delay"), "restart_delay"),
            health_check_timeout=_int(d.get("health_check_timeout"), "health_check_timeout"),
            use_scripts=_bool(d.get("use_scripts"), "use_scripts"),
            fallback_to_default=_bool(d.get("fallback_to_default"), "fallback_to_default"),
        )


@dataclass
class Config:
    project: ProjectConfig = field(default_factory=ProjectConfig)
    npm: NPMConfig = field(default_factory=NPMConfig)
    java: JavaConfig = field(default_factory=JavaConfig)
    scripts: ScriptsConfig = field(default_factory=ScriptsConfig)
    environments: dict[str, EnvironmentConfig] = field(default_factory=dict)
    deploy: DeployConfig = field(default_factory=DeployConfig)


def config_to_dict(config: Config) -> dict[str, Any]:
    """Return the configuration as plain data keyed as in deploy.yaml."""
    return {
        "project": asdict(config.project),
        "npm": asdict(config.npm),
        "java": asdict(config.java),
        "scripts": config.scripts.to_dict(),
        "environments": {
            name: env.to_dict() for name, env in config.environments.items()
        },
        "deploy": asdict(config.deploy),
    }


def config_from_dict(data: Any) -> Config:
    """Build a Config from parsed YAML data; absent keys take zero values."""
    d = _fields(data, "config")
    environments = d.get("environments")
    if environments is None:
        environments = {}
    elif not isinstance(environments, Mapping):
        raise ConfigError("解析配置文件失败: environments 应为映射")
    return Config(
        project=ProjectConfig.from_dict(d.get("project")),
        npm=NPMConfig.from_dict(d.get("npm")),
        java=JavaConfig.from_dict(d.get("java")),
        scripts=ScriptsConfig.from_dict(d.get("scripts")),
        environments={
            str(name): EnvironmentConfig.from_dict(env)
            for name, env in environments.items()
        },
        deploy=DeployConfig.from_dict(d.get("deploy")),
    )


def load_config(config_path: str = DEFAULT_CONFIG_FILE) -> Config:
    """Read and parse a YAML configuration file."""
    config_path = os.fspath(config_path) or DEFAULT_CONFIG_FILE
    if not os.path.exists(config_path):
        raise ConfigError(f"配置文件不存在: {config_path}")
    try:
        with open(config_path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"读取配置文件失败: {exc}") from exc
    return config_from_dict(data)


def get_default_config() -> Config:
    """Return the built-in default configuration."""
    return Config(
        project=ProjectConfig(name="my-app", type="auto"),
        npm=NPMConfig(
            build_command="npm run build",
            build_dir="dist",
            install_command="npm ci",
            node_version="18",
            default_start_command="pm2 restart ecosystem.config.js",
            default_stop_command="pm2 stop my-app",
        ),
        java=JavaConfig(
            build_tool="maven",
            build_command="mvn clean package -DskipTests",
            artifact_path="target/*.jar",
            java_version="11",
            runtime=JavaRuntime(
                heap_size=HeapSize(min="512m", max="2g"),
                jvm_options=[
                    "-XX:+UseG1GC",
                    "-XX:+HeapDumpOnOutOfMemoryError",
                    "-XX:HeapDumpPath=/opt/app/logs",
                    "-Dfile.encoding=UTF-8",
                    "-Duser.timezone=Asia/Shanghai",
                ],
                app_options=[
                    "--server.port=8080",
                    "--spring.profiles.active=prod",
                ],
            ),
            default_start_command=(
                "nohup java -Xms{{.HeapMin}} -Xmx{{.HeapMax}} {{.JvmOptions}} "
                "-jar {{.JarFile}} {{.AppOptions}} > {{.LogFile}} 2>&1 & "
                "echo $! > {{.PidFile}}"
            ),
            default_stop_command="kill -TERM $(cat {{.PidFile}}) && rm -f {{.PidFile}}",
            default_status_command="ps -p $(cat {{.PidFile}} 2>/dev/null) > /dev/null 2>&1",
        ),
        scripts=ScriptsConfig(
            global_config=GlobalScriptConfig(
                timeout=300, shell="/bin/bash", working_dir="/opt/app"
            ),
        ),
        environments={
            "dev": EnvironmentConfig(
                servers=[
                    ServerConfig(
                        host="dev.example.com",
                        user="deploy",
                        port=22,
                        key_file="~/.ssh/id_rsa",
                    )
                ],
                deploy_path="/opt/app",
                service_name="my-app",
                service_port=8080,
            )
        },
        deploy=DeployConfig(
            backup_count=5,
            timeout=300,
            restart_delay=10,
            health_check_timeout=60,
            use_scripts=True,
            fallback_to_default=True,
        ),
    )


def save_config(config: Config, config_path: str = DEFAULT_CONFIG_FILE) -> None:
    """Write the configuration as YAML, creating parent directories."""
    config_path = os.fspath(config_path) or DEFAULT_CONFIG_FILE
    directory = os.path.dirname(config_path) or "."
    try:
        os.makedirs(directory, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"创建配置目录失败: {exc}") from exc
    try:
        with open(config_path, "w", encoding="utf-8") as handle:
            yaml.safe_dump(
                config_to_dict(config),
                handle,
                allow_unicode=True,
                sort_keys=False,
                default_flow_style=False,
            )
    except OSError as exc:
        raise ConfigError(f"保存配置文件失败: {exc}") from exc