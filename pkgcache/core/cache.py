"""包元数据缓存

维护两张表:
  - index:     远程 ports 索引（origin -> name/version），获取代价高
  - installed: 本地 pkg_info 数据库（origin -> name/version），获取代价中等

缓存策略:
  - 首次读取前执行全量刷新
  - 安装/卸载后只标记 INSTALLED，下一次读取只刷新本地数据库
  - flush_cache 或新一轮运行开始时标记 FULL，下一次读取重建两张表
  - 刷新先构建新表，全部成功后再整表替换；外部命令失败时保留旧内容并抛 RefreshError

线程安全: 刷新与读取共用一把可重入锁，读取方不会看到重建到一半的表。

用法:
    cache = PackageCache(PkgTools(executor, config))
    cache.available_version("openssl")   # 首次调用触发全量刷新
    cache.reload_installed_only()        # 安装后
    cache.installed_version("security/openssl")
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from pkgcache.core.exceptions import ExecutionError, RefreshError
from pkgcache.core.models import PackageRecord, PackageStatus, RefreshLevel
from pkgcache.core.protocols import PackageTools
from pkgcache.core.resolver import NameResolver
from pkgcache.core.staleness import StalenessController
from pkgcache.core.tables import IndexTable, InstalledTable
from pkgcache.core.version import parse_token

logger = logging.getLogger(__name__)

DEFAULT_PORTS_PREFIX = "/usr/ports/"


@dataclass
class CacheStats:
    """缓存统计快照"""

    index_packages: int = 0
    installed_packages: int = 0
    level: str = RefreshLevel.NONE.value


class PackageCache:
    """进程内长期存活的包元数据缓存，由调用方构造并显式传递"""

    def __init__(self, tools: PackageTools, *, ports_prefix: str = DEFAULT_PORTS_PREFIX) -> None:
        self._tools = tools
        self._ports_prefix = ports_prefix
        self._index = IndexTable()
        self._installed = InstalledTable()
        self._staleness = StalenessController(RefreshLevel.FULL)
        self._resolver = NameResolver(self._installed, self._index)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # 缓存管理
    # ------------------------------------------------------------------

    @property
    def level(self) -> RefreshLevel:
        return self._staleness.level

    def refresh(self) -> bool:
        """按挂起级别刷新，返回是否执行了刷新"""
        with self._lock:
            return self._staleness.ensure_fresh(
                self._refresh_installed_only, self._refresh_all,
            )

    def reload_full(self) -> None:
        """下一次读取时重建索引 + 已安装数据库"""
        with self._lock:
            self._staleness.mark_fully_stale()

    reload = reload_full

    def reload_installed_only(self) -> None:
        """下一次读取时只重建已安装数据库（已挂起的全量刷新不会被降级）"""
        with self._lock:
            self._staleness.mark_installed_stale()

    def _refresh_installed_only(self) -> None:
        installed = self._load_installed()
        self._installed.replace(installed)

    def _refresh_all(self) -> None:
        installed = self._load_installed()
        index = self._load_index()
        self._installed.replace(installed)
        self._index.replace(index)

    def _load_installed(self) -> InstalledTable:
        logger.debug("刷新已安装数据库")
        table = InstalledTable()
        try:
            for token in self._tools.list_installed_packages():
                token = token.strip()
                parsed = parse_token(token)
                if parsed is None:
                    logger.debug("跳过无法解析的已安装包: %r", token)
                    continue
                origin = self._tools.lookup_origin(token).strip()
                if not origin:
                    logger.debug("已安装包没有 origin: %s", token)
                    continue
                table.add(PackageRecord(origin=origin, name=parsed.name, version=parsed.version))
        except ExecutionError as e:
            raise RefreshError(f"刷新已安装数据库失败: {e}") from e
        logger.info("已安装数据库: %d 个包", len(table))
        return table

    def _load_index(self) -> IndexTable:
        logger.debug("刷新远程索引")
        table = IndexTable()
        try:
            self._tools.fetch_index()
            path = self._tools.resolve_index_path()
            for fields in self._tools.read_index_file(path):
                rec = self._parse_index_record(fields)
                if rec is not None:
                    table.add(rec)
        except (ExecutionError, OSError) as e:
            raise RefreshError(f"刷新远程索引失败: {e}") from e
        table.rebuild_names()
        logger.info("远程索引: %d 个包 (%s)", len(table), path)
        return table

    def _parse_index_record(self, fields: list[str]) -> PackageRecord | None:
        """索引行: 字段 0 为 <name>-<version> 目录，字段 1 为带前缀的 origin"""
        if len(fields) < 2:
            return None
        token = fields[0].strip().rstrip("/").rsplit("/", 1)[-1]
        parsed = parse_token(token)
        if parsed is None:
            return None
        origin = fields[1].strip()
        if self._ports_prefix and origin.startswith(self._ports_prefix):
            origin = origin[len(self._ports_prefix):]
        if not origin:
            return None
        return PackageRecord(origin=origin, name=parsed.name, version=parsed.version)

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def resolve_origin(self, name: str) -> str:
        with self._lock:
            self.refresh()
            return self._resolver.resolve_origin(name)

    def available_version(self, name: str) -> str | None:
        """远程索引中的候选版本；name 可为包名或 origin

        origin 不在索引中时返回 None；包名无法解析时抛 PackageNotFoundError /
        AmbiguousPackageError。
        """
        with self._lock:
            self.refresh()
            origin = self._resolver.resolve_origin(name)
            return self._index.version_of(origin)

    candidate_version = available_version

    def installed_version(self, name: str) -> str | None:
        """本地已安装版本，未安装返回 None（不查询远程索引）"""
        with self._lock:
            self.refresh()
            origin = self._resolver.installed_origin(name)
            if origin is None:
                return None
            return self._installed.version_of(origin)

    def installed_package(self, name: str) -> PackageRecord | None:
        with self._lock:
            self.refresh()
            origin = self._resolver.installed_origin(name)
            return self._installed.get(origin) if origin else None

    def status_of(self, name: str) -> PackageStatus:
        """已安装版本与候选版本，在同一次加锁内读取，结果来自同一份数据"""
        with self._lock:
            self.refresh()
            installed_origin = self._resolver.installed_origin(name)
            installed = (
                self._installed.version_of(installed_origin) if installed_origin else None
            )
            origin = self._resolver.resolve_origin(name)
            return PackageStatus(
                name=name, origin=origin,
                installed_version=installed,
                candidate_version=self._index.version_of(origin),
            )

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                index_packages=len(self._index),
                installed_packages=len(self._installed),
                level=self._staleness.level.value,
            )
