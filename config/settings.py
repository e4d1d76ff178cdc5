"""
全局配置 — 从 .env 和环境变量加载
"""

import os
from dataclasses import dataclass, field
from typing import List


# ---------------------------------------------------------------------------
# .env 加载（不依赖 python-dotenv）
# ---------------------------------------------------------------------------

def load_dotenv(path: str = None):
    """从 .env 文件加载环境变量（已有的不覆盖）"""
    if path is None:
        # 项目根目录下的 .env
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        path = os.path.join(root, '.env')
    if not os.path.exists(path):
        return
    with open(path, encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            key, _, value = line.partition('=')
            key, value = key.strip(), value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


# ---------------------------------------------------------------------------
# Settings 数据类
# ---------------------------------------------------------------------------

@dataclass
class Settings:
    """项目配置（集中管理所有参数）"""

    # ---- INSPIRE-HEP ----
    inspire_base_url: str = ""
    search_page_size: int = 25
    request_timeout: int = 30
    request_interval: float = 1.0   # 两次 API 调用的最小间隔（秒）

    # ---- 字段归一化策略（上游数据不统一，做成可配置）----
    preferred_sources: List[str] = field(default_factory=lambda: [
        "arXiv", "IOP", "APS",
    ])
    identifier_url_name: str = "ADS Abstract Service"

    # ---- 存储 ----
    data_dir: str = ""
    storage_backend: str = ""      # "json" / "sqlite"
    db_path: str = ""

    # ---- 定时监控 ----
    monitor_interval_hours: int = 24
    paper_delay: float = 20.0      # 逐篇检查之间的停顿，避免触发限流

    # ---- Telegram ----
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""     # 允许的频道，同时也是监控报告的推送目标
    poll_timeout: int = 30

    def __post_init__(self):
        """从环境变量填充"""
        self.inspire_base_url = (
            self.inspire_base_url
            or os.getenv("INSPIRE_BASE_URL", "https://inspirehep.net/api/literature")
        )
        self.data_dir = self.data_dir or os.getenv("CITATION_DATA_DIR", "data")
        self.storage_backend = (
            self.storage_backend or os.getenv("CITATION_STORAGE", "json")
        ).lower()
        self.db_path = self.db_path or os.path.join(self.data_dir, "citations.db")
        self.telegram_bot_token = self.telegram_bot_token or os.getenv("TELEGRAM_BOT_TOKEN", "")
        self.telegram_chat_id = self.telegram_chat_id or os.getenv("TELEGRAM_CHAT_ID", "")

        if self.storage_backend not in ("json", "sqlite"):
            raise ValueError(
                f"未知的存储后端: {self.storage_backend}（可选 json / sqlite）"
            )


def load_settings(**overrides) -> Settings:
    """
    加载配置：.env → 默认值 → overrides

    用法:
        settings = load_settings(storage_backend="sqlite", paper_delay=5)
    """
    load_dotenv()
    return Settings(**overrides)
