"""
引用同步器 — 拉取 → 与已知标题比对 → 持久化 → 返回新引用

流程（单篇论文）:
    1. 校验 paper_id
    2. INSPIRE 查询引用记录（网络 / 上游错误直接抛出，不当作"没有新引用"）
    3. 结果为空 → 返回 []，不改动任何状态
    4. 读取已知标题
    5. 逐条归一化，标题（精确、区分大小写）不在已知集合里的就是新引用
    6. 有新引用 → 覆盖写已知标题 + 追加写引用日志
    7. 返回新引用列表
"""

from datetime import datetime, timezone
from typing import Dict, List

from agents.errors import CitationError
from tracker.models import Citation, SyncResult, validate_paper_id
from tracker.normalize import NormalizationPolicy, normalize_record
from utils.logger import get_logger

logger = get_logger("citation_monitor.sync")


class CitationSynchronizer:
    """单篇论文的引用同步"""

    def __init__(self, storage, source, policy: NormalizationPolicy = None,
                 clock=None):
        """
        Args:
            storage: StorageBackend 实现
            source:  提供 search_citing_records(paper_id) 的文献源客户端
            policy:  字段归一化策略
            clock:   返回当前 UTC 时间的函数（测试时可替换）
        """
        self.storage = storage
        self.source = source
        self.policy = policy or NormalizationPolicy()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def synchronize(self, paper_id: str) -> List[Citation]:
        """返回 paper_id 之前没见过的引用（可能为空）"""
        validate_paper_id(paper_id)

        records = self.source.search_citing_records(paper_id)
        if not records:
            return []

        known_titles = self.storage.load_known_titles(paper_id)
        seen = set(known_titles)
        new_citations = []

        for record in records:
            citation = normalize_record(record, self.policy)
            if citation.title in seen:
                continue
            new_citations.append(citation)
            known_titles.append(citation.title)
            seen.add(citation.title)

        if not new_citations:
            logger.info("论文 %s 没有新引用", paper_id)
            return []

        logger.info("论文 %s 发现 %d 条新引用", paper_id, len(new_citations))
        self.storage.save_known_titles(paper_id, known_titles)
        self.storage.append_citation_log(
            paper_id, self._log_entries(new_citations),
        )
        return new_citations

    def check(self, paper_id: str) -> SyncResult:
        """
        synchronize 的"结果对象"版本：失败不抛异常，而是放进 SyncResult.error

        InvalidArgumentError 也按失败返回，由调用方决定怎么提示。
        """
        try:
            citations = self.synchronize(paper_id)
        except CitationError as e:
            logger.warning("论文 %s 检查失败: %s", paper_id, e)
            return SyncResult(paper_id=paper_id, ok=False, error=e)
        return SyncResult(paper_id=paper_id, ok=True, citations=citations)

    def known_titles(self, paper_id: str) -> List[str]:
        validate_paper_id(paper_id)
        return self.storage.load_known_titles(paper_id)

    def citation_log(self, paper_id: str) -> List[Dict]:
        validate_paper_id(paper_id)
        return self.storage.load_citation_log(paper_id)

    def _log_entries(self, citations: List[Citation]) -> List[Dict]:
        checked_at = self._clock().isoformat()
        return [dict(c.to_dict(), checked_at=checked_at) for c in citations]
