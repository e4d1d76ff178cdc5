"""
通用速率限制器
"""

import time


class RateLimiter:
    """简单速率限制器 — 保证两次调用之间的最小间隔"""

    def __init__(self, min_interval: float = 1.0, clock=time.monotonic,
                 sleep=time.sleep):
        """
        Args:
            min_interval: 两次调用之间的最小间隔（秒）
            clock / sleep: 可替换，测试时不真正等待
        """
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call = None

    def wait(self):
        """在调用前执行，自动等待到满足间隔"""
        if self._last_call is not None:
            elapsed = self._clock() - self._last_call
            if elapsed < self.min_interval:
                self._sleep(self.min_interval - elapsed)
        self._last_call = self._clock()

    def __enter__(self):
        self.wait()
        return self

    def __exit__(self, *args):
        pass
