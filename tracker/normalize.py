"""
INSPIRE 原始记录 → Citation 归一化

INSPIRE 各字段来源不统一（同一篇文章可能有 arXiv / 出版社多个标题版本），
优先来源列表和标识符类型都做成可配置策略，上游 schema 变了只改配置。
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from agents.errors import UpstreamError
from tracker.models import Citation


@dataclass(frozen=True)
class NormalizationPolicy:
    """字段挑选策略"""
    preferred_sources: Tuple[str, ...] = ("arXiv", "IOP", "APS")
    identifier_url_name: str = "ADS Abstract Service"
    default_title: str = "N/A"
    default_abstract: str = "N/A"
    default_source: str = "Unknown"
    default_identifier: str = "N/A"

    @classmethod
    def from_settings(cls, settings) -> "NormalizationPolicy":
        return cls(
            preferred_sources=tuple(settings.preferred_sources),
            identifier_url_name=settings.identifier_url_name,
        )


def _entries(metadata: Dict, key: str) -> List[Dict]:
    """取 metadata 里的列表字段；结构不对（非列表 / 元素非对象）视为上游数据异常"""
    value = metadata.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(e, dict) for e in value):
        raise UpstreamError(f"INSPIRE 记录字段 {key} 结构异常: {value!r:.100}")
    return value


def _text(entry: Optional[Dict], key: str, default: str) -> str:
    if not entry:
        return default
    value = entry.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise UpstreamError(f"INSPIRE 记录字段 {key} 不是字符串: {value!r:.100}")
    return value


def _pick_preferred(entries: List[Dict],
                    preferred: Tuple[str, ...]) -> Optional[Dict]:
    """优先取来源在白名单里的条目，否则取第一条"""
    if not entries:
        return None
    for entry in entries:
        if entry.get("source") in preferred:
            return entry
    return entries[0]


def _extract_identifier(metadata: Dict, policy: NormalizationPolicy) -> str:
    for ext in _entries(metadata, "external_system_identifiers"):
        link = _text(ext, "url_link", "")
        if ext.get("url_name") == policy.identifier_url_name and link:
            # 例: https://ui.adsabs.harvard.edu/abs/arXiv:2401.01234 → 2401.01234
            return link.split(":")[-1]

    dois = _entries(metadata, "dois")
    if dois:
        return _text(dois[0], "value", policy.default_identifier)

    return policy.default_identifier


def record_metadata(record) -> Dict:
    """hit → metadata；hit 或 metadata 不是对象时抛 UpstreamError"""
    if not isinstance(record, dict):
        raise UpstreamError(f"INSPIRE 返回的记录不是对象: {record!r:.100}")
    metadata = record.get("metadata")
    if metadata is None:
        return {}
    if not isinstance(metadata, dict):
        raise UpstreamError("INSPIRE 记录的 metadata 不是对象")
    return metadata


def normalize_record(record: Dict, policy: NormalizationPolicy = None) -> Citation:
    """把一条 INSPIRE hit 转成 Citation；结构异常抛 UpstreamError"""
    policy = policy or NormalizationPolicy()
    metadata = record_metadata(record)

    title_obj = _pick_preferred(_entries(metadata, "titles"), policy.preferred_sources)
    abstract_obj = _pick_preferred(_entries(metadata, "abstracts"), policy.preferred_sources)

    return Citation(
        title=_text(title_obj, "title", policy.default_title),
        abstract=_text(abstract_obj, "value", policy.default_abstract),
        source=_text(title_obj, "source", policy.default_source),
        identifier=_extract_identifier(metadata, policy),
    )
