"""
Citation Bot — 组装各组件，跑 Telegram 长轮询主循环

主循环是唯一的驱动者：收命令 → 回复 → tick 一下定时任务。
"""

import time
from typing import Dict, List

import requests

from agents.inspire_agent import InspireClient
from bot.commands import CitationService, CommandDispatcher
from notifier.telegram_bot import TelegramNotifier
from scheduler.monitor_job import JobState, MonitorJob
from storage import create_storage
from tracker.normalize import NormalizationPolicy
from tracker.paper_store import PaperStore
from tracker.synchronizer import CitationSynchronizer
from utils.logger import get_logger

logger = get_logger("citation_monitor.bot")


class CitationBot:
    """引用监控机器人"""

    def __init__(self, settings, source=None, storage=None, notifier=None,
                 scheduler=None, sleep=time.sleep):
        self.settings = settings
        self._sleep = sleep

        self.source = source or InspireClient.from_settings(settings)
        self.storage = storage or create_storage(settings)
        self.notifier = notifier or TelegramNotifier(
            token=settings.telegram_bot_token,
            chat_id=settings.telegram_chat_id,
        )

        self.store = PaperStore(self.storage, self.source)
        self.synchronizer = CitationSynchronizer(
            self.storage, self.source,
            policy=NormalizationPolicy.from_settings(settings),
        )

        self.job_state = JobState()
        self.monitor = MonitorJob(
            self.synchronizer, self.store, reporter=self.report,
            state=self.job_state,
            interval_hours=settings.monitor_interval_hours,
            paper_delay=settings.paper_delay,
            scheduler=scheduler,
            sleep=sleep,
        )

        self.service = CitationService(self.store, self.synchronizer, self.monitor)
        self.dispatcher = CommandDispatcher(
            self.service,
            allowed_chat_id=settings.telegram_chat_id,
            interval_hours=settings.monitor_interval_hours,
        )

    def report(self, text: str):
        """监控报告：配置了 Telegram 就推送，否则打印到终端"""
        if self.notifier.configured:
            self.notifier.send_message(text)
        else:
            print(text)

    # ------------------------------------------------------------------
    # 主循环
    # ------------------------------------------------------------------

    def handle_update(self, update: Dict) -> List[str]:
        """处理一条 Telegram update，返回已发送的回复"""
        message = update.get("message") or {}
        text = message.get("text")
        chat_id = (message.get("chat") or {}).get("id")
        if not text or chat_id is None:
            return []

        sender = message.get("from") or {}
        user_name = sender.get("username") or sender.get("first_name") or ""

        replies = self.dispatcher.handle(chat_id, user_name, text)
        for reply in replies:
            self.notifier.send_message(reply, chat_id=chat_id)
        return replies

    def poll_once(self, offset: int = None) -> int:
        """拉一次 update 并处理，返回下一次的 offset"""
        updates = self.notifier.get_updates(
            offset=offset, timeout=self.settings.poll_timeout,
        )
        for update in updates:
            offset = update["update_id"] + 1
            try:
                self.handle_update(update)
            except requests.RequestException as e:
                logger.error("回复消息失败: %s", e)
            except Exception:
                # 单条命令出错不能拖垮主循环
                logger.exception("处理命令失败: %s", update)
        return offset

    def run_forever(self):
        if not self.notifier.token:
            raise ValueError("请设置 TELEGRAM_BOT_TOKEN 环境变量")

        logger.info("Citation bot 已启动")
        logger.info("允许的频道: %s", self.settings.telegram_chat_id or "（不限）")

        offset = None
        while True:
            try:
                offset = self.poll_once(offset)
            except requests.RequestException as e:
                logger.warning("拉取 Telegram 消息失败，5s 后重试: %s", e)
                self._sleep(5)
            try:
                self.monitor.run_pending()
            except Exception:
                logger.exception("定时巡检执行失败")

    def close(self):
        self.monitor.stop()
        self.source.close()
        self.storage.close()
