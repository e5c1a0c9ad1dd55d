"""pkgcache 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
ServiceContainer 在 main 中构造一次，经 click.Context.obj 传给各子命令。
"""

import os
from typing import Any

import click

from pkgcache import __version__
from pkgcache.core.config import DEFAULT_CONFIG_PATH, init_config
from pkgcache.core.exceptions import InternalError, PkgCacheError
from pkgcache.services.container import ServiceContainer
from pkgcache.utils.logger import setup_logging


class _PkgCacheGroup(click.Group):
    """将业务异常转换为友好的命令行错误（退出码 1）

    InternalError 属于程序逻辑错误，保留原始堆栈直接抛出。
    """

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except InternalError:
            raise
        except PkgCacheError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e


@click.group(cls=_PkgCacheGroup)
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_PATH, help="配置文件路径")
@click.pass_context
def main(ctx: click.Context, config_path: str) -> None:
    """pkgcache - ports 包元数据本地缓存"""
    setup_logging(
        level=os.getenv("PKGCACHE_LOG_LEVEL", "INFO"),
        json_output=os.getenv("PKGCACHE_LOG_JSON", "") == "1",
    )
    if ctx.obj is None:
        ctx.obj = ServiceContainer(config=init_config(config_path))


# 注册各领域子命令
from pkgcache.cli.cmd_cache import register as _reg_cache  # noqa: E402
from pkgcache.cli.cmd_pkg import register as _reg_pkg  # noqa: E402

_reg_cache(main)
_reg_pkg(main)
