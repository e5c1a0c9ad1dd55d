"""缓存数据表

两张表都以 origin 为主键:
  - InstalledTable: 本地已安装数据库，反向映射 name -> origin（同名多个 origin 时取先写入者）
  - IndexTable:     远程 ports 索引，反向映射 name -> {origin}（同名包可分布在多个分类下）

刷新时整表替换（replace），不做增量合并。
"""

from __future__ import annotations

import logging
from typing import Iterable

from pkgcache.core.models import PackageRecord

logger = logging.getLogger(__name__)


class InstalledTable:
    """本地已安装包表"""

    def __init__(self, records: Iterable[PackageRecord] = ()) -> None:
        self._by_origin: dict[str, PackageRecord] = {}
        self._origin_by_name: dict[str, str] = {}
        for rec in records:
            self.add(rec)

    def add(self, rec: PackageRecord) -> None:
        """写入一条记录；同名包已存在时名称仍指向先写入的 origin"""
        self._by_origin[rec.origin] = rec
        first = self._origin_by_name.setdefault(rec.name, rec.origin)
        if first != rec.origin:
            logger.warning(
                "已安装包 '%s' 对应多个 origin，按包名解析时使用 %s (忽略 %s)",
                rec.name, first, rec.origin,
            )

    def origin_of(self, name: str) -> str | None:
        return self._origin_by_name.get(name)

    def get(self, origin: str) -> PackageRecord | None:
        return self._by_origin.get(origin)

    def version_of(self, origin: str) -> str | None:
        rec = self._by_origin.get(origin)
        return rec.version if rec else None

    def replace(self, other: InstalledTable) -> None:
        """整表替换为 other 的内容"""
        self._by_origin = dict(other._by_origin)
        self._origin_by_name = dict(other._origin_by_name)

    def __len__(self) -> int:
        return len(self._by_origin)

    def __contains__(self, origin: object) -> bool:
        return origin in self._by_origin


class IndexTable:
    """远程 ports 索引表"""

    def __init__(self, records: Iterable[PackageRecord] = ()) -> None:
        self._by_origin: dict[str, PackageRecord] = {}
        self._origins_by_name: dict[str, dict[str, None]] = {}
        for rec in records:
            self._by_origin[rec.origin] = rec
        self.rebuild_names()

    def add(self, rec: PackageRecord) -> None:
        """写入一条记录，名称反向映射需在批量写入后调用 rebuild_names()"""
        self._by_origin[rec.origin] = rec

    def rebuild_names(self) -> None:
        """由 origin -> name 反转出 name -> {origin}（保持插入顺序）"""
        inverted: dict[str, dict[str, None]] = {}
        for origin, rec in self._by_origin.items():
            if rec.name not in inverted:
                inverted[rec.name] = {}
            inverted[rec.name][origin] = None
        self._origins_by_name = inverted

    def origins_of(self, name: str) -> list[str]:
        return list(self._origins_by_name.get(name, ()))

    def version_of(self, origin: str) -> str | None:
        rec = self._by_origin.get(origin)
        return rec.version if rec else None

    def replace(self, other: IndexTable) -> None:
        """整表替换为 other 的内容"""
        self._by_origin = dict(other._by_origin)
        self._origins_by_name = {k: dict(v) for k, v in other._origins_by_name.items()}

    def __len__(self) -> int:
        return len(self._by_origin)

    def __contains__(self, origin: object) -> bool:
        return origin in self._by_origin
