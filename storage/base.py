"""
存储端口 — 每张逻辑表一组 load / save

同步器和论文库只依赖这个接口，持久化方式（JSON 文件 / SQLite）可以随意替换。
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from tracker.models import TrackedPaper


class StorageBackend(ABC):
    """持久化后端接口"""

    # ---- 被追踪论文 ----

    @abstractmethod
    def load_tracked(self) -> List[TrackedPaper]:
        """读取全部被追踪论文（按加入顺序），没有数据时返回 []"""

    @abstractmethod
    def save_tracked(self, papers: List[TrackedPaper]) -> None:
        """整体覆盖写入"""

    # ---- 已知引用标题（去重索引）----

    @abstractmethod
    def load_known_titles(self, paper_id: str) -> List[str]:
        pass

    @abstractmethod
    def save_known_titles(self, paper_id: str, titles: List[str]) -> None:
        pass

    # ---- 新引用日志（只追加）----

    @abstractmethod
    def append_citation_log(self, paper_id: str, entries: List[Dict]) -> None:
        pass

    @abstractmethod
    def load_citation_log(self, paper_id: str) -> List[Dict]:
        pass

    def close(self):
        pass
