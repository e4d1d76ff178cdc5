"""
INSPIRE-HEP Agent — 查询引用某篇论文的最新文献、查询单篇论文标题

失败不再"打印后返回 None"：网络问题抛 NetworkError，
上游返回异常抛 UpstreamError / NotFoundError，由调用方决定怎么处理。
"""

from typing import Dict, List

import requests

from agents.errors import NetworkError, NotFoundError, UpstreamError
from utils.logger import get_logger
from utils.rate_limit import RateLimiter

logger = get_logger("citation_monitor.inspire")


class InspireClient:
    """INSPIRE-HEP literature API 客户端"""

    BASE_URL = "https://inspirehep.net/api/literature"
    ACCEPT = "application/vnd+inspire.record.ui+json"
    UNTITLED = "Untitled"

    def __init__(self, base_url: str = None, page_size: int = 25,
                 timeout: int = 30, delay: float = 1.0,
                 session: requests.Session = None):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.page_size = page_size
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["Accept"] = self.ACCEPT
        self._limiter = RateLimiter(min_interval=delay)

    @classmethod
    def from_settings(cls, settings) -> "InspireClient":
        return cls(
            base_url=settings.inspire_base_url,
            page_size=settings.search_page_size,
            timeout=settings.request_timeout,
            delay=settings.request_interval,
        )

    # ------------------------------------------------------------------
    # 底层请求
    # ------------------------------------------------------------------

    def _get_json(self, url: str, params: dict = None) -> Dict:
        """GET 并解析 JSON；按失败类型抛出对应异常"""
        self._limiter.wait()
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise NetworkError(f"INSPIRE 请求超时({self.timeout}s): {e}") from e
        except requests.RequestException as e:
            raise NetworkError(f"INSPIRE 网络异常: {e}") from e

        status = resp.status_code
        if status == 404:
            raise NotFoundError(f"INSPIRE 记录不存在: {url}")
        if status != 200:
            raise UpstreamError(f"INSPIRE HTTP {status}: {resp.text[:300]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(f"INSPIRE 返回的不是合法 JSON: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamError("INSPIRE 返回结构异常（顶层不是对象）")
        return data

    # ------------------------------------------------------------------
    # 对外接口
    # ------------------------------------------------------------------

    def search_citing_records(self, paper_id: str) -> List[Dict]:
        """
        查询引用 paper_id 的最新文献（最多 page_size 条，按时间倒序）

        Returns:
            INSPIRE hit 列表；没有引用时返回 []
        """
        params = {
            "sort": "mostrecent",
            "size": self.page_size,
            "page": 1,
            "q": f"refersto:recid:{paper_id}",
        }
        logger.debug("查询引用: recid=%s", paper_id)
        data = self._get_json(self.base_url, params=params)

        hits = data.get("hits")
        if not isinstance(hits, dict) or not isinstance(hits.get("hits"), list):
            raise UpstreamError("INSPIRE 搜索结果缺少 hits.hits")

        items = hits["hits"]
        if not items:
            logger.info("论文 %s 暂无引用", paper_id)
        return items

    def fetch_record_title(self, paper_id: str) -> str:
        """查询单篇论文的标题（缺失时返回 "Untitled"）"""
        data = self._get_json(f"{self.base_url}/{paper_id}")

        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            raise UpstreamError(f"INSPIRE 记录 {paper_id} 缺少 metadata")

        titles = metadata.get("titles") or []
        if not isinstance(titles, list):
            raise UpstreamError(f"INSPIRE 记录 {paper_id} 的 titles 不是列表")
        if not titles:
            return self.UNTITLED
        if not isinstance(titles[0], dict):
            raise UpstreamError(f"INSPIRE 记录 {paper_id} 的 titles 元素不是对象")

        title = titles[0].get("title")
        if title is not None and not isinstance(title, str):
            raise UpstreamError(f"INSPIRE 记录 {paper_id} 的标题不是字符串")
        return title or self.UNTITLED

    def close(self):
        self.session.close()
