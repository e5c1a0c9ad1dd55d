"""统一异常体系

所有业务异常继承 PkgCacheError，替代散落的 ValueError / RuntimeError。
CLI 层可据此输出友好提示。
"""

from __future__ import annotations


class PkgCacheError(Exception):
    """缓存层基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(PkgCacheError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class PackageNotFoundError(PkgCacheError):
    """索引与本地数据库中均找不到该包"""

    code = "PACKAGE_NOT_FOUND"


class AmbiguousPackageError(PkgCacheError):
    """包名对应多个 origin 且无法猜测"""

    code = "AMBIGUOUS_PACKAGE"

    def __init__(self, message: str, candidates: list[str] | None = None) -> None:
        super().__init__(message)
        self.candidates = candidates or []


class ExecutionError(PkgCacheError):
    """外部命令执行失败（非零返回码、超时、命令不存在）"""

    code = "EXECUTION_ERROR"


class RefreshError(PkgCacheError):
    """缓存刷新失败，原有缓存内容保持不变，可重试"""

    code = "REFRESH_ERROR"
    retryable = True


class InternalError(PkgCacheError):
    """内部状态不一致（程序逻辑错误）"""

    code = "INTERNAL_ERROR"
