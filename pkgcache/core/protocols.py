"""领域协议定义

缓存层依赖的外部能力（包管理工具链）以 Protocol 形式定义，
PackageCache 只依赖抽象，测试时可注入内存实现。
"""

from __future__ import annotations

from typing import Iterable, Protocol


class PackageTools(Protocol):
    """包管理工具链协议

    实现方负责执行外部命令并返回按行切分的文本；
    任何命令失败都应抛出 ExecutionError。
    """

    def fetch_index(self) -> None:
        """更新磁盘上的远程索引缓存"""
        ...

    def resolve_index_path(self) -> str:
        """返回已拉取的索引文件路径"""
        ...

    def read_index_file(self, path: str) -> Iterable[list[str]]:
        """逐条返回索引记录（按 '|' 切分后的字段列表）"""
        ...

    def list_installed_packages(self) -> Iterable[str]:
        """逐行返回已安装包的 "<name>-<version>" 标识"""
        ...

    def lookup_origin(self, token: str) -> str:
        """返回已安装包对应的 origin"""
        ...
