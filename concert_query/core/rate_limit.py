import asyncio
import time
from typing import Optional


class RateLimiter:
    """
    协程级别的请求间隔控制

    MusicBrainz 要求每个客户端大约每秒最多一个请求。
    等待发生在事件循环中，不占用线程池里的工作线程。
    """

    def __init__(self, min_interval_seconds: float):
        self.min_interval = min_interval_seconds
        self._lock: Optional[asyncio.Lock] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._last_start = 0.0

    def _get_lock(self) -> asyncio.Lock:
        # 锁绑定在创建它的事件循环上，换了循环（例如命令行多次 asyncio.run）就重新创建
        loop = asyncio.get_running_loop()
        if self._lock is None or self._loop is not loop:
            self._lock = asyncio.Lock()
            self._loop = loop
        return self._lock

    async def wait(self) -> None:
        """等待直到满足最小请求间隔"""
        if self.min_interval <= 0:
            return
        async with self._get_lock():
            wait = self.min_interval - (time.monotonic() - self._last_start)
            if wait > 0:
                await asyncio.sleep(wait)
            self._last_start = time.monotonic()
