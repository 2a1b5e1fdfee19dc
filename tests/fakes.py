"""
Test doubles shared across the suite.
"""


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedLookup:
    """Async lookup returning scripted results, one per call; the last result repeats."""

    def __init__(self, results, clock=None, cost_seconds: float = 0.0):
        self.results = list(results)
        self.clock = clock
        self.cost_seconds = cost_seconds
        self.calls = 0
        self.started_at = []

    async def __call__(self):
        if self.clock is not None:
            self.started_at.append(self.clock())
            self.clock.advance(self.cost_seconds)
        index = min(self.calls, len(self.results) - 1)
        self.calls += 1
        result = self.results[index]
        if isinstance(result, Exception):
            raise result
        return result


class RecordingComponent:
    """Initializable component appending its lifecycle calls to a shared journal."""

    def __init__(self, name, journal, failures=0, error=None):
        self.name = name
        self.journal = journal
        self.failures = failures
        self.error = error or RuntimeError(f"{name} exploded")
        self.initialized = False

    def initialize(self):
        self.journal.append(("init", self.name))
        if self.failures:
            self.failures -= 1
            raise self.error
        self.initialized = True

    def reset(self):
        self.journal.append(("reset", self.name))
        self.initialized = False
