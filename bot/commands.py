"""
命令层 — 对外暴露的六个操作 + 聊天命令解析 / 回复文案
"""

from typing import List

from agents.errors import CitationError, InvalidArgumentError
from notifier.telegram_bot import describe_error, format_citations
from tracker.models import Citation, TrackedPaper
from utils.logger import get_logger

logger = get_logger("citation_monitor.commands")


HELP_TEXT = (
    "Welcome to the Citation Tool, {user}\n\n"
    "The feed currently relies on the INSPIRE HEP Database\n"
    "To identify the PAPER_ID, see https://inspirehep.net/literature/2670073 "
    "where 2670073 is the PAPER_ID\n\n"
    "To get started tracking citations, please use the commands below.\n\n"
    "/checkCitations PAPER_ID - Manually check for the updated citations of any paper, "
    "sharing data with the monitor.\n"
    "/addPaper PAPER_ID - Adds a paper to the monitored list of papers\n"
    "/removePaper PAPER_ID - Removes a paper from the monitored list of papers\n"
    "/getMonitoring - Returns the list of currently tracked papers, with their titles and ID\n"
    "/startMonitor - Checks the list of tracked papers for updated citations, "
    "once every {hours}h\n"
    "/stopMonitor - Stops checking the list of updated papers"
)

WRONG_CHANNEL = "This command can only be used in the designated channel."


class CitationService:
    """引用监控的命令接口（不关心聊天平台和权限）"""

    def __init__(self, store, synchronizer, monitor):
        self.store = store
        self.synchronizer = synchronizer
        self.monitor = monitor

    def check_citations(self, paper_id: str) -> List[Citation]:
        return self.synchronizer.synchronize(paper_id)

    def add_paper(self, paper_id: str) -> str:
        return self.store.add(paper_id).title

    def remove_paper(self, paper_id: str) -> bool:
        return self.store.remove(paper_id)

    def list_tracked_papers(self) -> List[TrackedPaper]:
        return self.store.list()

    def paper_title(self, paper_id: str):
        return self.store.get(paper_id)

    def start_monitoring(self) -> bool:
        """False = 已在运行"""
        return self.monitor.start()

    def stop_monitoring(self) -> bool:
        """False = 本来就没在运行"""
        return self.monitor.stop()

    @property
    def monitoring(self) -> bool:
        return self.monitor.state.running


class CommandDispatcher:
    """
    把聊天里的 "/command 参数" 翻译成 CitationService 调用，返回要回复的消息列表

    allowed_chat_id 为空时不做频道限制。
    """

    def __init__(self, service: CitationService, allowed_chat_id: str = "",
                 interval_hours: int = 24):
        self.service = service
        self.allowed_chat_id = str(allowed_chat_id or "")
        self.interval_hours = interval_hours
        self._handlers = {
            "help": self._help,
            "checkcitations": self._check,
            "addpaper": self._add,
            "removepaper": self._remove,
            "getmonitoring": self._list,
            "startmonitor": self._start,
            "stopmonitor": self._stop,
        }

    @staticmethod
    def parse(text: str):
        """'/checkCitations@MyBot 123' → ('checkcitations', '123')；不是命令返回 (None, '')"""
        text = (text or "").strip()
        if not text.startswith("/"):
            return None, ""
        head, _, arg = text.partition(" ")
        name = head[1:].split("@", 1)[0].lower()
        return name, arg.strip()

    def handle(self, chat_id, user_name: str, text: str) -> List[str]:
        name, arg = self.parse(text)
        if name is None:
            return []

        handler = self._handlers.get(name)
        if handler is None:
            return ["Unknown command. Type /help to see the available commands."]

        if self.allowed_chat_id and str(chat_id) != self.allowed_chat_id:
            return [WRONG_CHANNEL]

        logger.info("收到命令 /%s %s (from %s)", name, arg, user_name)
        return handler(arg, user_name)

    # ------------------------------------------------------------------
    # 各命令
    # ------------------------------------------------------------------

    def _help(self, arg: str, user_name: str) -> List[str]:
        return [HELP_TEXT.format(user=user_name or "there", hours=self.interval_hours)]

    def _check(self, arg: str, user_name: str) -> List[str]:
        replies = ["Checking citations..."]
        try:
            citations = self.service.check_citations(arg)
        except InvalidArgumentError:
            return [self._usage("checkCitations")]
        except CitationError as e:
            logger.warning("检查引用失败 %s: %s", arg, e)
            return replies + [describe_error(e)]

        if not citations:
            replies.append("No new citations found.")
        else:
            replies.append(format_citations(self._title_or_none(arg), citations))
        return replies

    def _add(self, arg: str, user_name: str) -> List[str]:
        replies = ["Adding paper..."]
        try:
            existing = self._title_or_none(arg)
            if existing is not None:
                return replies + [f"Already tracking: {existing}."]
            title = self.service.add_paper(arg)
        except InvalidArgumentError:
            return [self._usage("addPaper")]
        except CitationError as e:
            logger.warning("添加论文失败 %s: %s", arg, e)
            return replies + [f"Error adding the paper. {describe_error(e)}"]
        return replies + [f"Successfully started tracking: {title}."]

    def _remove(self, arg: str, user_name: str) -> List[str]:
        replies = ["Removing paper..."]
        try:
            removed = self.service.remove_paper(arg)
        except InvalidArgumentError:
            return [self._usage("removePaper")]
        except CitationError as e:
            logger.warning("移除论文失败 %s: %s", arg, e)
            return replies + [f"Error removing the paper. {describe_error(e)}"]
        if not removed:
            return replies + ["That paper was not being tracked."]
        return replies + ["Successfully stopped tracking the paper."]

    def _list(self, arg: str, user_name: str) -> List[str]:
        try:
            papers = self.service.list_tracked_papers()
        except CitationError as e:
            return [describe_error(e)]
        if not papers:
            return ["No tracked papers found."]
        lines = ["Currently tracking the papers:"]
        lines.extend(f"{p.title} (ID: {p.paper_id})" for p in papers)
        return ["\n".join(lines)]

    def _start(self, arg: str, user_name: str) -> List[str]:
        if self.service.monitoring:
            return ["Monitoring is already running."]
        try:
            papers = self.service.list_tracked_papers()
        except CitationError as e:
            return [describe_error(e)]
        if not papers:
            return ["Unable to begin monitoring. Please add a paper to track before monitoring."]

        if not self.service.start_monitoring():
            return ["Monitoring is already running."]
        return [f"Monitoring started. Updates will occur every {self.interval_hours} hours."]

    def _stop(self, arg: str, user_name: str) -> List[str]:
        if self.service.stop_monitoring():
            return ["Monitoring has been stopped."]
        return ["The monitor is not currently running."]

    # ------------------------------------------------------------------

    def _title_or_none(self, paper_id: str):
        try:
            return self.service.paper_title(paper_id)
        except CitationError:
            return None

    @staticmethod
    def _usage(command: str) -> str:
        return f"Please provide a valid PAPER_ID. Example: /{command} 2670073"
