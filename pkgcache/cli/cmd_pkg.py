"""CLI: 包状态与安装/卸载命令"""

from __future__ import annotations

import click

from pkgcache.services.container import ServiceContainer


def register(group: click.Group) -> None:
    group.add_command(status)
    group.add_command(install)
    group.add_command(remove)


@click.command()
@click.argument("name")
@click.pass_obj
def status(svc: ServiceContainer, name: str) -> None:
    """查看包的已安装版本与候选版本"""
    st = svc.packages.status(name)
    click.echo(f"{st.name} ({st.origin})")
    click.echo(f"  已安装: {st.installed_version or '(无)'}")
    click.echo(f"  候选:   {st.candidate_version or '(无)'}")
    if st.upgradable:
        click.echo("  可升级")


@click.command()
@click.argument("name")
@click.option("--version", "version", default=None, help="指定版本")
@click.option("--source", default=None, help="本地包文件路径（走 pkg_add）")
@click.pass_obj
def install(svc: ServiceContainer, name: str, version: str | None, source: str | None) -> None:
    """安装或升级包"""
    svc.packages.install(name, version, source=source)
    click.echo(f"已安装: {name}")


@click.command()
@click.argument("name")
@click.option("--version", "version", default=None, help="指定版本（默认当前已安装版本）")
@click.pass_obj
def remove(svc: ServiceContainer, name: str, version: str | None) -> None:
    """卸载包"""
    svc.packages.remove(name, version)
    click.echo(f"已卸载: {name}")
