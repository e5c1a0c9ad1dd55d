"""核心数据模型

缓存层的数据类集中定义，tables / resolver / cache / services 统一从此处导入。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RefreshLevel(str, Enum):
    """下一次读取前必须执行的刷新级别"""

    NONE = "none"            # 缓存可信，无需刷新
    INSTALLED = "installed"  # 仅刷新本地已安装数据库（快）
    FULL = "full"            # 刷新已安装数据库 + 远程索引（慢）


@dataclass(frozen=True)
class ParsedVersion:
    """从 "<name>-<version>" 中拆出的字段

    version 保留原始版本串；base / revision / epoch 已解析但调用方暂不使用。
    """

    name: str
    version: str
    base: str = ""
    revision: int = 0
    epoch: int = 0


@dataclass(frozen=True)
class PackageRecord:
    """单条缓存记录（origin 为主键）"""

    origin: str
    name: str
    version: str


@dataclass
class PackageStatus:
    """包状态快照: 已安装版本 + 候选版本"""

    name: str
    origin: str = ""
    installed_version: str | None = None
    candidate_version: str | None = None

    @property
    def installed(self) -> bool:
        return self.installed_version is not None

    @property
    def upgradable(self) -> bool:
        """候选版本与已安装版本不同（不做版本大小比较）"""
        return (
            self.installed
            and self.candidate_version is not None
            and self.candidate_version != self.installed_version
        )
