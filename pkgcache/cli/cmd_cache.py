"""CLI: 缓存查询与刷新命令"""

from __future__ import annotations

import click

from pkgcache.services.container import ServiceContainer


def register(group: click.Group) -> None:
    group.add_command(refresh)
    group.add_command(available)
    group.add_command(installed)
    group.add_command(resolve)
    group.add_command(stats)


@click.command()
@click.option("--installed-only", is_flag=True, help="只刷新本地已安装数据库")
@click.pass_obj
def refresh(svc: ServiceContainer, installed_only: bool) -> None:
    """立即刷新缓存"""
    if installed_only:
        svc.cache.reload_installed_only()
    else:
        svc.cache.reload_full()
    svc.cache.refresh()
    s = svc.cache.stats()
    click.echo(f"索引: {s.index_packages} 个包  已安装: {s.installed_packages} 个包")


@click.command()
@click.argument("name")
@click.pass_obj
def available(svc: ServiceContainer, name: str) -> None:
    """查询远程索引中的候选版本"""
    version = svc.cache.available_version(name)
    click.echo(version if version is not None else f"索引中没有版本: {name}")


@click.command()
@click.argument("name")
@click.pass_obj
def installed(svc: ServiceContainer, name: str) -> None:
    """查询本地已安装版本"""
    version = svc.cache.installed_version(name)
    click.echo(version if version is not None else f"未安装: {name}")


@click.command()
@click.argument("name")
@click.pass_obj
def resolve(svc: ServiceContainer, name: str) -> None:
    """解析包名对应的 origin"""
    click.echo(svc.cache.resolve_origin(name))


@click.command()
@click.pass_obj
def stats(svc: ServiceContainer) -> None:
    """显示缓存统计"""
    s = svc.cache.stats()
    click.echo(f"索引包数: {s.index_packages}")
    click.echo(f"已安装包数: {s.installed_packages}")
    click.echo(f"挂起刷新: {s.level}")
