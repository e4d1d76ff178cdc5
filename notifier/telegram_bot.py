"""
Telegram 通知器 — 收命令（getUpdates 长轮询）、发消息、拼装引用报告
"""

import time
import requests
from typing import Dict, List, Optional

from agents.errors import (
    InvalidArgumentError,
    NotFoundError,
    NetworkError,
    UpstreamError,
    StorageError,
)
from utils.logger import get_logger
from utils.text_clean import clean_abstract, clean_title, truncate


TELEGRAM_MAX_MSG_LEN = 4096
ABSTRACT_PREVIEW_LEN = 600

logger = get_logger("citation_monitor.telegram")


# ----------------------------------------------------------------------
# 消息文本
# ----------------------------------------------------------------------

def describe_error(error: Exception) -> str:
    """每种错误对应一条不同的用户提示"""
    if isinstance(error, InvalidArgumentError):
        return "Please provide a valid PAPER_ID (the number at the end of an inspirehep.net/literature/ link)."
    if isinstance(error, NotFoundError):
        return "That paper was not found on INSPIRE-HEP. Please check the PAPER_ID."
    if isinstance(error, NetworkError):
        return "Could not reach INSPIRE-HEP right now. Please try again later."
    if isinstance(error, UpstreamError):
        return "INSPIRE-HEP returned an unexpected response. Please try again later."
    if isinstance(error, StorageError):
        return "Could not read or save the tracking data. Please contact the bot maintainer."
    return "Something went wrong, please try again."


def format_failure(subject: str, error: Exception) -> str:
    return f"⚠️ Could not check {subject}: {describe_error(error)}"


def format_citations(paper_title: Optional[str], citations: List) -> str:
    """
    新引用报告:

        New "<paper title>" citations found:

        <citation title>
        <abstract>
        (<source>: <identifier>)
    """
    header = f'New "{paper_title}" citations found:' if paper_title else "New citations found:"
    lines = [header, ""]
    for citation in citations:
        lines.append(clean_title(citation.title))
        lines.append(truncate(clean_abstract(citation.abstract), ABSTRACT_PREVIEW_LEN))
        lines.append(f"({citation.source}: {citation.identifier})")
        lines.append("")
    return "\n".join(lines).rstrip()


# ----------------------------------------------------------------------
# Bot API
# ----------------------------------------------------------------------

class TelegramNotifier:
    """Telegram Bot 通知器"""

    def __init__(self, token: str, chat_id: str):
        self.token = token
        self.chat_id = chat_id

    @property
    def configured(self) -> bool:
        return bool(self.token and self.chat_id)

    def _request(self, method: str, timeout: int = 60, **kwargs):
        """带重试的 Telegram Bot API 请求"""
        url = f"https://api.telegram.org/bot{self.token}/{method}"
        for attempt in range(3):
            try:
                resp = requests.post(url, timeout=timeout, **kwargs)
                if resp.status_code == 429:
                    retry_after = resp.json().get("parameters", {}).get("retry_after", 5)
                    logger.warning("Telegram 限流，等待 %ss...", retry_after)
                    time.sleep(retry_after)
                    continue
                resp.raise_for_status()
                return resp.json()
            except requests.RequestException as e:
                if attempt < 2:
                    wait = 2 ** (attempt + 1)
                    logger.warning("Telegram 请求失败，%ss 后重试: %s", wait, e)
                    time.sleep(wait)
                else:
                    raise
        return None

    def send_message(self, text: str, chat_id: str = None):
        """发送文本消息（自动分段）"""
        chat_id = chat_id or self.chat_id
        chunks = [text[i:i + TELEGRAM_MAX_MSG_LEN]
                  for i in range(0, len(text), TELEGRAM_MAX_MSG_LEN)]
        for chunk in chunks:
            self._request("sendMessage", json={
                "chat_id": chat_id,
                "text": chunk,
                "disable_web_page_preview": True,
            })
            if len(chunks) > 1:
                time.sleep(0.5)

    def get_updates(self, offset: int = None, timeout: int = 30) -> List[Dict]:
        """长轮询拉取新消息"""
        payload = {"timeout": timeout, "allowed_updates": ["message"]}
        if offset is not None:
            payload["offset"] = offset
        data = self._request("getUpdates", timeout=timeout + 10, json=payload)
        if not data or not data.get("ok"):
            return []
        return data.get("result", [])
