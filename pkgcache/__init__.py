"""pkgcache - ports 包元数据本地缓存"""

__version__ = "0.1.0"
