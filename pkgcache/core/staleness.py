"""缓存过期级别管理

下一次读取缓存前需要执行的刷新:
  - FULL:      刷新 pkg_info 数据库 + 远程 ports 索引（慢）
  - INSTALLED: 仅刷新本地 pkg_info 数据库，用于安装/卸载后的快速复查
  - NONE:      无需刷新，需调用 mark_* 方法后才会再次刷新

FULL 是 INSTALLED 的超集: 已挂起的 FULL 不会被 INSTALLED 降级。
"""

from __future__ import annotations

import logging
from typing import Callable

from pkgcache.core.exceptions import InternalError
from pkgcache.core.models import RefreshLevel

logger = logging.getLogger(__name__)


class StalenessController:
    """跟踪挂起的刷新级别，在读取前按级别执行刷新"""

    def __init__(self, initial: RefreshLevel = RefreshLevel.FULL) -> None:
        self._level = initial

    @property
    def level(self) -> RefreshLevel:
        return self._level

    def mark_fully_stale(self) -> None:
        self._level = RefreshLevel.FULL

    def mark_installed_stale(self) -> None:
        if self._level == RefreshLevel.FULL:
            return
        self._level = RefreshLevel.INSTALLED

    def ensure_fresh(
        self,
        refresh_installed: Callable[[], None],
        refresh_all: Callable[[], None],
    ) -> bool:
        """按挂起级别执行刷新，返回是否实际刷新过

        刷新函数抛出异常时级别保持不变，下一次读取会重试。
        """
        level = self._level
        if level == RefreshLevel.NONE:
            return False
        if level == RefreshLevel.INSTALLED:
            refresh_installed()
        elif level == RefreshLevel.FULL:
            refresh_all()
        else:
            raise InternalError(f"未知的刷新级别: {level!r}")
        logger.debug("缓存刷新完成 (level=%s)", level.value)
        self._level = RefreshLevel.NONE
        return True
