from datetime import datetime, timedelta


class FakeClock:
    """Callable clock for components that take ``clock=``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now
