"""
错误分类 — 让调用方区分"检查过，没有新引用"和"根本没检查成功"
"""


class CitationError(Exception):
    """引用监控基类异常"""
    pass


class InvalidArgumentError(CitationError, ValueError):
    """PAPER_ID 不是非空纯数字字符串 → 请求发出前就拒绝"""
    pass


class NotFoundError(CitationError):
    """INSPIRE 上查不到该记录（404）"""
    pass


class UpstreamError(CitationError):
    """INSPIRE 返回非 200，或响应不是预期的 JSON 结构"""
    pass


class NetworkError(CitationError):
    """网络层失败（DNS / TCP / TLS / 超时）"""
    pass


class StorageError(CitationError):
    """持久化文件读写失败，或内容无法解析"""
    pass
