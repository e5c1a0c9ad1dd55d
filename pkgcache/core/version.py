"""包名-版本串解析

ports 工具链输出的包标识形如 "openssl-1.0.0_3,2":
  - 名称为最后一个 '-' 之前的全部内容（名称本身可以含 '-'）
  - 版本格式: <version>[_<revision>][,<epoch>]

解析失败返回 None 而不是抛异常，索引文件和 pkg_info 输出中常混有
非包的噪声行，调用方直接跳过即可。
"""

from __future__ import annotations

import re

from pkgcache.core.models import ParsedVersion

_TOKEN_RE = re.compile(r"^(.+)-([^-]+)$")
_VERSION_RE = re.compile(r"^([^_,]+)(?:_(\d+))?(?:,(\d+))?$")
_WHITESPACE_RE = re.compile(r"\s")
_BAD_VERSION_CHARS_RE = re.compile(r"[\s-]")


def split_version(version: str) -> tuple[str, int, int] | None:
    """拆分版本串为 (base, revision, epoch)，revision / epoch 缺省为 0"""
    if _BAD_VERSION_CHARS_RE.search(version):
        return None
    m = _VERSION_RE.match(version)
    if m is None:
        return None
    base, revision, epoch = m.groups()
    return base, int(revision or 0), int(epoch or 0)


def parse_token(token: str) -> ParsedVersion | None:
    """解析 "<name>-<version>"，格式不符时返回 None

    示例:
        >>> parse_token("openssl-1.0.0_3,2")
        ParsedVersion(name='openssl', version='1.0.0_3,2', base='1.0.0', revision=3, epoch=2)
        >>> parse_token("has space-1.0") is None
        True
    """
    if _WHITESPACE_RE.search(token):
        return None
    m = _TOKEN_RE.match(token)
    if m is None:
        return None
    name, version = m.groups()
    parts = split_version(version)
    if parts is None:
        return None
    base, revision, epoch = parts
    # version 为原始版本串，base/revision/epoch 仅附带
    return ParsedVersion(
        name=name, version=version,
        base=base, revision=revision, epoch=epoch,
    )
