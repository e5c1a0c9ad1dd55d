"""集中配置管理

包管理命令、索引前缀、超时与缓存刷新策略统一在此配置。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields

from pkgcache.core.exceptions import ConfigError
from pkgcache.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "/usr/local/etc/pkgcache.yml"


@dataclass
class Config:
    """缓存层全局配置"""

    # 远程索引
    fetch_index_cmd: str = "uma fetch ftpindex"
    env_cmd: str = "uma env"
    index_env_key: str = "PKG_INDEX"
    ports_prefix: str = "/usr/ports/"

    # 本地数据库
    list_installed_cmd: str = "pkg_info -Ea"
    origin_cmd: str = "pkg_info -qo"

    # 安装 / 卸载
    install_cmd: str = "pkg_add"
    upgrade_cmd: str = "pkg_upgrade --clean"
    remove_cmd: str = "pkg_delete"
    default_options: str = ""
    agree_license: bool = False

    # 执行
    command_timeout: int = 600

    # 缓存刷新策略: 操作前/后是否强制全量刷新
    flush_cache_before: bool = False
    flush_cache_after: bool = False

    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.command_timeout, int) or self.command_timeout <= 0:
            raise ConfigError(f"command_timeout 必须为正整数: {self.command_timeout!r}")
        if not self.index_env_key:
            raise ConfigError("index_env_key 不能为空")

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_PATH) -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path)
        if not data:
            return cls()
        known = {f.name for f in fields(cls)} - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件无效: {path}: {e}") from e
        cfg.extra = extra
        return cfg


# 进程级默认配置，由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """从文件初始化配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
