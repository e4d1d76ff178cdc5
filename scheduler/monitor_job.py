"""
定时监控任务 — 每 N 小时逐篇检查被追踪论文的新引用

任务状态放在显式的 JobState 对象里（谁调度谁持有），不用全局变量。
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

import schedule

from agents.errors import CitationError
from notifier.telegram_bot import format_citations, format_failure
from tracker.models import SyncResult
from utils.logger import get_logger

logger = get_logger("citation_monitor.monitor")


class JobStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class JobState:
    """周期任务状态；job 即取消令牌（schedule.Job）"""
    status: JobStatus = JobStatus.IDLE
    job: Optional[schedule.Job] = None
    initial_job: Optional[schedule.Job] = None   # 启动后的首轮巡检（一次性）
    started_at: Optional[datetime] = None
    last_run_at: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self.status is JobStatus.RUNNING


@dataclass
class SweepReport:
    """一轮巡检的汇总"""
    results: List[SyncResult] = field(default_factory=list)

    @property
    def checked(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> List[SyncResult]:
        return [r for r in self.results if not r.ok]

    @property
    def new_citations(self) -> int:
        return sum(len(r.citations) for r in self.results if r.ok)


class MonitorJob:
    """被追踪论文的周期巡检"""

    def __init__(self, synchronizer, store, reporter: Callable[[str], None],
                 state: JobState = None, interval_hours: int = 24,
                 paper_delay: float = 20.0, scheduler: schedule.Scheduler = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Args:
            synchronizer: CitationSynchronizer
            store:        PaperStore
            reporter:     推送文本消息的函数（如 TelegramNotifier.send_message）
            state:        JobState，由调用方持有并传入
            paper_delay:  两篇论文之间的停顿（秒），避免触发 INSPIRE 限流
        """
        self.synchronizer = synchronizer
        self.store = store
        self.reporter = reporter
        self.state = state if state is not None else JobState()
        self.interval_hours = interval_hours
        self.paper_delay = paper_delay
        self.scheduler = scheduler or schedule.Scheduler()
        self._sleep = sleep

    # ------------------------------------------------------------------
    # 启停
    # ------------------------------------------------------------------

    def start(self, run_now: bool = True) -> bool:
        """
        开始监控；已在运行时返回 False

        run_now=True 时首轮巡检登记为一次性任务，在下一次 run_pending 时执行，
        不阻塞调用方（聊天命令先回复，巡检随后进行）。
        """
        if self.state.running:
            return False

        self.state.job = self.scheduler.every(self.interval_hours).hours.do(self.sweep)
        self.state.status = JobStatus.RUNNING
        self.state.started_at = datetime.now()
        logger.info("定时监控已启动，每 %s 小时检查一次", self.interval_hours)

        if run_now:
            self.state.initial_job = self.scheduler.every(1).seconds.do(self._initial_sweep)
        return True

    def _initial_sweep(self):
        """一次性任务：先注销自己，巡检出错也不会每秒重跑"""
        job, self.state.initial_job = self.state.initial_job, None
        if job is not None:
            self.scheduler.cancel_job(job)
        self.sweep()

    def stop(self) -> bool:
        """停止监控；未在运行时返回 False。正在进行的巡检不会被打断"""
        if not self.state.running:
            return False

        for job in (self.state.job, self.state.initial_job):
            if job is not None:
                self.scheduler.cancel_job(job)
        self.state.job = None
        self.state.initial_job = None
        self.state.status = JobStatus.IDLE
        logger.info("定时监控已停止")
        return True

    def run_pending(self):
        """协作式 tick — 由主循环定期调用"""
        self.scheduler.run_pending()

    # ------------------------------------------------------------------
    # 巡检
    # ------------------------------------------------------------------

    def sweep(self) -> SweepReport:
        """逐篇检查；单篇失败只记录并继续，不中断整轮"""
        self.state.last_run_at = datetime.now()
        report = SweepReport()

        try:
            tracked = self.store.list()
        except CitationError as e:
            logger.error("读取监控列表失败: %s", e)
            self._report(format_failure("the tracked paper list", e))
            return report

        self._report(f"📅 Monitoring {len(tracked)} paper(s) for daily citation updates.")

        for idx, paper in enumerate(tracked):
            if idx > 0 and self.paper_delay > 0:
                self._sleep(self.paper_delay)

            self._report(f'🔍 Checking citations for: "{paper.title}" (ID: {paper.paper_id})')
            result = self.synchronizer.check(paper.paper_id)
            report.results.append(result)

            if not result.ok:
                self._report(format_failure(f'"{paper.title}"', result.error))
            elif result.citations:
                self._report(format_citations(paper.title, result.citations))
            else:
                self._report(f"No new citations found for {paper.title}.")

        logger.info(
            "巡检完成: %d 篇，%d 条新引用，%d 篇失败",
            report.checked, report.new_citations, len(report.failed),
        )
        return report

    def _report(self, text: str):
        """推送失败只记日志，不影响巡检"""
        try:
            self.reporter(text)
        except Exception as e:
            logger.error("推送消息失败: %s", e)
