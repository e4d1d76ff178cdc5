"""
被追踪论文库 — 增 / 删 / 列表 / 查标题
"""

from typing import List, Optional

from tracker.models import TrackedPaper, validate_paper_id
from utils.logger import get_logger

logger = get_logger("citation_monitor.store")


class PaperStore:
    """被追踪论文的增删查（按加入顺序保存，paper_id 唯一）"""

    def __init__(self, storage, source):
        """
        Args:
            storage: StorageBackend 实现
            source:  提供 fetch_record_title(paper_id) 的文献源客户端
        """
        self.storage = storage
        self.source = source

    def add(self, paper_id: str) -> TrackedPaper:
        """
        加入监控列表；已存在时直接返回原条目（不报错，也不再查上游）

        标题查询失败会原样抛出，此时不写入任何东西。
        """
        validate_paper_id(paper_id)

        existing = self._find(paper_id)
        if existing:
            logger.info("论文 %s 已在监控列表中", paper_id)
            return existing

        title = self.source.fetch_record_title(paper_id)

        tracked = self.storage.load_tracked()
        paper = TrackedPaper(paper_id=paper_id, title=title)
        tracked.append(paper)
        self.storage.save_tracked(tracked)
        logger.info('已加入监控: "%s" (ID: %s)', title, paper_id)
        return paper

    def remove(self, paper_id: str) -> bool:
        """移出监控列表；不存在时什么也不做。返回是否真的删掉了"""
        validate_paper_id(paper_id)

        tracked = self.storage.load_tracked()
        updated = [p for p in tracked if p.paper_id != paper_id]
        if len(updated) == len(tracked):
            logger.info("论文 %s 不在监控列表中，无需删除", paper_id)
            return False

        self.storage.save_tracked(updated)
        logger.info("已移出监控: %s", paper_id)
        return True

    def list(self) -> List[TrackedPaper]:
        return self.storage.load_tracked()

    def get(self, paper_id: str) -> Optional[str]:
        """返回已追踪论文的标题，未追踪返回 None"""
        paper = self._find(paper_id)
        return paper.title if paper else None

    def _find(self, paper_id: str) -> Optional[TrackedPaper]:
        for paper in self.storage.load_tracked():
            if paper.paper_id == paper_id:
                return paper
        return None
