"""ports 工具链适配

通过 CommandExecutor 调用 uma / pkg_info，实现 PackageTools 协议:
  - fetch_index():             uma fetch ftpindex
  - resolve_index_path():      解析 `uma env` 输出中的 PKG_INDEX='...'
  - read_index_file(path):     读取 INDEX 文件，按 '|' 切分
  - list_installed_packages(): pkg_info -Ea
  - lookup_origin(token):      pkg_info -qo <token>

所有命令失败（非零返回码 / 超时 / 命令不存在）均抛 ExecutionError。
"""

from __future__ import annotations

import logging
import re
import shlex
from typing import Iterator

from pkgcache.core.config import Config
from pkgcache.core.exceptions import ExecutionError
from pkgcache.utils.shell import CommandExecutor, LocalExecutor, run_cmd

logger = logging.getLogger(__name__)

_ENV_LINE_RE = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=(.*)$")


def parse_env_dump(text: str) -> dict[str, str]:
    """解析 KEY='value' 形式的环境变量输出，容忍单引号、双引号或无引号"""
    result: dict[str, str] = {}
    for line in text.splitlines():
        m = _ENV_LINE_RE.match(line.rstrip("\r\n"))
        if m is None:
            continue
        key, value = m.groups()
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        result[key] = value
    return result


class PkgTools:
    """基于本地命令的 PackageTools 实现"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._config = config or Config()
        self._executor = executor or LocalExecutor()

    def _run(self, cmd: str | list[str], label: str) -> list[str]:
        r = run_cmd(
            self._executor, cmd,
            timeout=self._config.command_timeout, label=label,
        )
        return r.lines()

    def fetch_index(self) -> None:
        self._run(self._config.fetch_index_cmd, "fetch-index")

    def resolve_index_path(self) -> str:
        lines = self._run(self._config.env_cmd, "env")
        env = parse_env_dump("\n".join(lines))
        key = self._config.index_env_key
        path = env.get(key, "")
        if not path:
            raise ExecutionError(f"`{self._config.env_cmd}` 输出中没有 {key}")
        logger.debug("索引文件: %s", path)
        return path

    def read_index_file(self, path: str) -> Iterator[list[str]]:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                line = line.rstrip("\r\n")
                if line:
                    yield line.split("|")

    def list_installed_packages(self) -> list[str]:
        return [line.strip() for line in self._run(self._config.list_installed_cmd, "list-installed")]

    def lookup_origin(self, token: str) -> str:
        cmd = [*shlex.split(self._config.origin_cmd), token]
        lines = self._run(cmd, "lookup-origin")
        return lines[0].strip() if lines else ""
