"""Shell 命令执行工具: 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，方便测试替换。
包管理命令均为同步阻塞调用，由调用方传入超时。
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

from pkgcache.core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def lines(self) -> list[str]:
        """stdout 中的非空行（已去除行尾换行）"""
        return [line.rstrip("\r\n") for line in self.stdout.splitlines() if line.strip()]


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议: 抽象子进程调用

    测试时可注入 mock 实现，无需 patch subprocess。
    """

    def execute(
        self,
        cmd: str | list[str],
        *,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地命令执行器（默认实现）"""

    def execute(
        self,
        cmd: str | list[str],
        *,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        args = shlex.split(cmd) if isinstance(cmd, str) else cmd
        try:
            r = subprocess.run(
                args, capture_output=True, text=True,
                env=env, check=False, timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(f"命令超时 ({timeout}s): {' '.join(args)}") from e
        except OSError as e:
            raise ExecutionError(f"无法执行命令 {args[0]}: {e}") from e
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout,
            stderr=r.stderr,
        )


def run_cmd(
    executor: CommandExecutor,
    cmd: str | list[str],
    *,
    timeout: int | None = None,
    label: str = "cmd",
) -> CommandResult:
    """执行命令，非零返回码抛 ExecutionError

    Args:
        executor: 命令执行器
        cmd: 命令字符串或参数列表
        timeout: 超时秒数（None 表示不限）
        label: 日志标签
    """
    logger.info("  %s: %s", label, cmd if isinstance(cmd, str) else shlex.join(cmd))
    r = executor.execute(cmd, timeout=timeout)
    if not r.success:
        raise ExecutionError(f"{label}失败 (rc={r.returncode}): {r.stderr[:500]}")
    return r
