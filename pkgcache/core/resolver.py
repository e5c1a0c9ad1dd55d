"""包名 -> origin 解析

解析顺序（不可调换，否则升级检查会解析到过期的 origin）:
  1. 含 '/' 的查询视为 origin，原样返回
  2. 已安装数据库中存在该名称 → 使用已安装的 origin
  3. 远程索引:
     - 0 个候选 → PackageNotFoundError
     - 1 个候选 → 直接使用
     - 多个候选 → 猜测形如 "<分类>/<name>" 的第一个 origin 并告警；
                  无匹配则 AmbiguousPackageError
"""

from __future__ import annotations

import logging
import re

from pkgcache.core.exceptions import AmbiguousPackageError, PackageNotFoundError
from pkgcache.core.tables import IndexTable, InstalledTable

logger = logging.getLogger(__name__)


def is_origin(query: str) -> bool:
    """查询串是否已是 origin（含路径分隔符）"""
    return "/" in query


class NameResolver:
    """包名解析器: 只读访问两张缓存表"""

    def __init__(self, installed: InstalledTable, index: IndexTable) -> None:
        self._installed = installed
        self._index = index

    def resolve_origin(self, query: str) -> str:
        if is_origin(query):
            return query

        origin = self._installed.origin_of(query)
        if origin is not None:
            return origin

        candidates = self._index.origins_of(query)
        if not candidates:
            raise PackageNotFoundError(f"包 '{query}' 不存在")
        if len(candidates) == 1:
            return candidates[0]
        return self._guess(query, candidates)

    def installed_origin(self, query: str) -> str | None:
        """仅在已安装数据库中解析，未安装返回 None"""
        if is_origin(query):
            return query
        return self._installed.origin_of(query)

    @staticmethod
    def _guess(query: str, candidates: list[str]) -> str:
        pattern = re.compile(rf"^[^/]*/{re.escape(query)}$")
        for origin in candidates:
            if pattern.match(origin):
                logger.warning(
                    "包 '%s' 匹配多个 origin，已猜测使用 %s，建议显式指定 origin (候选: %s)",
                    query, origin, " ".join(candidates),
                )
                return origin
        raise AmbiguousPackageError(
            f"包 '{query}' 匹配多个包，origin 为: {' '.join(candidates)}",
            candidates=candidates,
        )
