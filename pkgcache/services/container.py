"""服务容器: 统一依赖注入

PackageCache 在容器内只构造一次，随容器存活；CLI 构造容器后通过
click.Context.obj 显式传递，不使用模块级全局缓存实例。

依赖关系图（→ 表示依赖）:
  packages → cache → tools → executor

用法:
    container = ServiceContainer(config=Config.from_file("pkgcache.yml"))
    container.cache.available_version("openssl")
    container.packages.install("security/openssl")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pkgcache.core.cache import PackageCache
    from pkgcache.core.config import Config
    from pkgcache.core.protocols import PackageTools
    from pkgcache.services.package_service import PackageService
    from pkgcache.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器: 同一容器内共享一个 PackageCache"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from pkgcache.core.config import get_config
            config = get_config()
        self._config = config
        if executor is None:
            from pkgcache.utils.shell import LocalExecutor
            executor = LocalExecutor()
        self._executor = executor

    @property
    def config(self) -> Config:
        return self._config

    @property
    def tools(self) -> PackageTools:
        if "tools" not in self._instances:
            from pkgcache.services.pkgtools import PkgTools
            self._instances["tools"] = PkgTools(self._config, self._executor)
        return self._instances["tools"]  # type: ignore[return-value]

    @property
    def cache(self) -> PackageCache:
        if "cache" not in self._instances:
            from pkgcache.core.cache import PackageCache
            self._instances["cache"] = PackageCache(
                self.tools, ports_prefix=self._config.ports_prefix,
            )
            logger.debug("PackageCache 已创建")
        return self._instances["cache"]  # type: ignore[return-value]

    @property
    def packages(self) -> PackageService:
        if "packages" not in self._instances:
            from pkgcache.services.package_service import PackageService
            self._instances["packages"] = PackageService(
                self.cache, self._config, self._executor,
            )
        return self._instances["packages"]  # type: ignore[return-value]
