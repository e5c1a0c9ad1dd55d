"""包操作服务

职责:
- 查询包状态（已安装版本 + 候选版本）
- 执行 pkg_add / pkg_upgrade / pkg_delete
- 操作完成后按 flush_cache 策略标记缓存过期:
    flush_cache_after=True  → 全量刷新（索引 + 已安装数据库）
    否则                   → 仅刷新已安装数据库
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from pkgcache.core.cache import PackageCache
from pkgcache.core.config import Config
from pkgcache.core.exceptions import PackageNotFoundError
from pkgcache.core.models import PackageStatus
from pkgcache.core.resolver import is_origin
from pkgcache.utils.shell import CommandExecutor, LocalExecutor, run_cmd

logger = logging.getLogger(__name__)


class PackageService:
    """包操作服务: 所有操作共用同一个 PackageCache 实例"""

    def __init__(
        self,
        cache: PackageCache,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._cache = cache
        self._config = config or Config()
        self._executor = executor or LocalExecutor()

    @property
    def cache(self) -> PackageCache:
        return self._cache

    def status(self, name: str) -> PackageStatus:
        """查询包的已安装版本与候选版本"""
        if self._config.flush_cache_before:
            self._cache.reload_full()
        st = self._cache.status_of(name)
        logger.debug(
            "%s 已安装版本: %s 候选版本: %s",
            name, st.installed_version or "(无)", st.candidate_version or "(无)",
        )
        return st

    def install(
        self, name: str, version: str | None = None, *, source: str | None = None,
    ) -> None:
        """安装包: 本地文件用 pkg_add，其余走 pkg_upgrade"""
        if source and source.startswith("/"):
            if not Path(source).exists():
                raise PackageNotFoundError(f"包 {name} 不存在: {source}")
            args = [*shlex.split(self._config.install_cmd), *self._options(), source]
        else:
            target = name if is_origin(name) or not version else f"{name}-{version}"
            args = [*shlex.split(self._config.upgrade_cmd), *self._options(), target]
        self._execute(args, label="install")
        self._after_change()

    def upgrade(
        self, name: str, version: str | None = None, *, source: str | None = None,
    ) -> None:
        self.install(name, version, source=source)

    def remove(self, name: str, version: str | None = None) -> None:
        """卸载包，未指定版本时使用当前已安装版本"""
        rec = self._cache.installed_package(name)
        if rec is None:
            raise PackageNotFoundError(f"包 {name} 未安装")
        ver = version or rec.version
        args = [*shlex.split(self._config.remove_cmd), *self._options(), f"{rec.name}-{ver}"]
        self._execute(args, label="remove")
        self._after_change()

    def purge(self, name: str, version: str | None = None) -> None:
        self.remove(name, version)

    def _options(self) -> list[str]:
        return shlex.split(self._config.default_options)

    def _execute(self, args: list[str], *, label: str) -> None:
        if self._config.agree_license:
            cmd: list[str] = ["sh", "-c", f"yes | {shlex.join(args)}"]
        else:
            cmd = args
        run_cmd(self._executor, cmd, timeout=self._config.command_timeout, label=label)

    def _after_change(self) -> None:
        if self._config.flush_cache_after:
            self._cache.reload_full()
        else:
            self._cache.reload_installed_only()
