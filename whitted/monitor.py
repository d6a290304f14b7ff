"""
monitor.py

Background per-core CPU sampling around a render, so experiment runs can
report how busy the machine actually was.
"""
import threading
import time

import psutil


class CpuMonitor:
    """Sample ``psutil.cpu_percent(percpu=True)`` on a daemon thread.

    Usable as a context manager::

        with CpuMonitor() as mon:
            render(...)
        avg, peak = mon.summary()
    """

    def __init__(self, interval=0.1):
        self.interval = interval
        self.samples = []  # one list of per-core percentages per sample
        self._stop = threading.Event()
        self._thread = None

    def _run(self):
        # first call only establishes psutil's baseline
        psutil.cpu_percent(interval=None, percpu=True)
        while not self._stop.wait(self.interval):
            self.samples.append(psutil.cpu_percent(interval=None, percpu=True))

    def start(self):
        self._thread = threading.Thread(target=self._run, name="cpu-monitor", daemon=True)
        self._thread.start()
        return self

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc):
        self.stop()
        return False

    def summary(self):
        """Return ``(average, max)`` of the per-core mean utilisation."""
        samples = self.samples or [psutil.cpu_percent(interval=None, percpu=True)]
        per_core = [sum(core) / len(core) for core in zip(*samples)]
        if not per_core:
            return 0.0, 0.0
        return sum(per_core) / len(per_core), max(per_core)
