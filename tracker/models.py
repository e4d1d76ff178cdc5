"""
数据模型：被追踪论文、引用记录、单次检查结果
"""

import re
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from agents.errors import CitationError, InvalidArgumentError


PAPER_ID_PATTERN = re.compile(r"[0-9]+")


def validate_paper_id(paper_id) -> str:
    """PAPER_ID 必须是非空纯数字字符串（INSPIRE recid），否则抛 InvalidArgumentError"""
    if not isinstance(paper_id, str) or not PAPER_ID_PATTERN.fullmatch(paper_id):
        raise InvalidArgumentError(
            f"Invalid PAPER_ID {paper_id!r}: expected a numeric INSPIRE record id"
        )
    return paper_id


@dataclass(frozen=True)
class TrackedPaper:
    """被监控的论文（paper_id 唯一）"""
    paper_id: str
    title: str

    def to_dict(self) -> dict:
        return {"paperId": self.paper_id, "title": self.title}

    @classmethod
    def from_dict(cls, data: dict) -> "TrackedPaper":
        return cls(paper_id=str(data["paperId"]), title=str(data["title"]))


@dataclass(frozen=True)
class Citation:
    """一条引用了被追踪论文的文献（已归一化）"""
    title: str
    abstract: str
    source: str
    identifier: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Citation":
        return cls(
            title=data["title"],
            abstract=data["abstract"],
            source=data["source"],
            identifier=data["identifier"],
        )


@dataclass
class SyncResult:
    """
    单次同步的结果：

    - ok=True,  citations=[]   → 检查过，没有新引用
    - ok=True,  citations=[…]  → 发现新引用
    - ok=False, error=…        → 检查失败（网络 / 上游 / 存储）
    """
    paper_id: str
    ok: bool
    citations: List[Citation] = field(default_factory=list)
    error: Optional[CitationError] = None

    @property
    def has_new(self) -> bool:
        return self.ok and bool(self.citations)
