"""测试共享 fixture: 内存版包管理工具链 + 命令执行器"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from pkgcache.core.exceptions import ExecutionError
from pkgcache.utils.shell import CommandResult


@dataclass
class FakeTools:
    """内存版 PackageTools，记录各能力的调用次数"""

    installed: dict[str, str] = field(default_factory=dict)  # token -> origin
    index: list[str] = field(default_factory=list)           # 原始 INDEX 行
    index_path: str = "/var/db/uma/INDEX"
    fail_fetch: bool = False
    fail_installed: bool = False
    calls: dict[str, int] = field(default_factory=dict)

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def fetch_index(self) -> None:
        self._count("fetch_index")
        if self.fail_fetch:
            raise ExecutionError("fetch-index失败 (rc=1): network down")

    def resolve_index_path(self) -> str:
        self._count("resolve_index_path")
        return self.index_path

    def read_index_file(self, path: str) -> list[list[str]]:
        self._count("read_index_file")
        return [line.split("|") for line in self.index]

    def list_installed_packages(self) -> list[str]:
        self._count("list_installed_packages")
        if self.fail_installed:
            raise ExecutionError("list-installed失败 (rc=1): pkgdb locked")
        return list(self.installed)

    def lookup_origin(self, token: str) -> str:
        self._count("lookup_origin")
        return self.installed[token]


def index_line(token: str, origin: str) -> str:
    """构造一行 INDEX 记录: <name-version>|<带前缀的 origin>|..."""
    return f"{token}|/usr/ports/{origin}|/usr/local|desc|/usr/ports/{origin}/pkg-descr|maintainer@example.org|cat"


class FakeExecutor:
    """按命令前缀返回预设结果的 CommandExecutor"""

    def __init__(self) -> None:
        self.responses: dict[str, CommandResult] = {}
        self.commands: list[list[str]] = []

    def on(self, prefix: str, stdout: str = "", returncode: int = 0, stderr: str = "") -> None:
        self.responses[prefix] = CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)

    def execute(self, cmd, *, env=None, timeout=None) -> CommandResult:
        args = cmd.split() if isinstance(cmd, str) else list(cmd)
        self.commands.append(args)
        joined = " ".join(args)
        for prefix in sorted(self.responses, key=len, reverse=True):
            if joined.startswith(prefix):
                return self.responses[prefix]
        return CommandResult(returncode=0, stdout="", stderr="")


@pytest.fixture()
def fake_tools() -> FakeTools:
    return FakeTools()


@pytest.fixture()
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture()
def make_index_line():
    """INDEX 行工厂 fixture: make_index_line("openssl-1.0.0_3,2", "security/openssl")"""
    return index_line
