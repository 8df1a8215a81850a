"""
Shared pipes, services and providers used across the test suite.
"""

from microioc import ServiceProvider


class _CountingPipe:
    def handle(self, obj, next_):
        obj["state"] += 1
        return next_(obj)

    def terminate(self, obj, next_):
        obj["state"] -= 1
        return next_(obj)


class PipeA(_CountingPipe):
    pass


class PipeB(_CountingPipe):
    pass


class PipeC(_CountingPipe):
    pass


class PipeD(_CountingPipe):
    pass


class RecordingPipe:
    """Records the order pipes are entered in ``obj['trail']``."""

    label = "?"

    def handle(self, obj, next_):
        obj["trail"].append(self.label)
        return next_(obj)

    def terminate(self, obj, next_):
        obj["trail"].append(self.label)
        return next_(obj)


class First(RecordingPipe):
    label = "first"


class Second(RecordingPipe):
    label = "second"


class Third(RecordingPipe):
    label = "third"


class Blocker:
    """Never calls its continuation."""

    def handle(self, obj, next_):
        obj["blocked"] = True

    def terminate(self, obj, next_):
        obj["blocked"] = True


class Database:
    def __init__(self):
        self.connected = True


class Repository:
    def __init__(self, Database):
        self.database = Database


class Mailer:
    pass


class UserService:
    def __init__(self, Repository, Mailer):
        self.repository = Repository
        self.mailer = Mailer


class EagerProvider(ServiceProvider):
    provides = ["Database"]

    def __init__(self, app):
        super().__init__(app)
        self.events = []

    def register(self):
        self.events.append("register")
        self.app.bind("Database", Database)

    def load(self):
        self.events.append("load")


class DeferredProvider(ServiceProvider):
    provides = ["Mailer"]
    is_deferred = True

    def __init__(self, app):
        super().__init__(app)
        self.events = []

    def register(self):
        self.events.append("register")
        self.app.bind("Mailer", Mailer)

    def load(self):
        self.events.append("load")
