import logging

from microioc import Container, ErrorHandler, ServiceProvider


class DBConnection:
    def __init__(self, dsn: str):
        self.dsn = dsn
        self.connected = False

    def connect(self) -> None:
        print(f"[DB] Connecting to {self.dsn}")
        self.connected = True

    def query(self, sql: str) -> str:
        if not self.connected:
            raise RuntimeError(f"Not connected to {self.dsn}")
        return f"Result: {sql}"


class Mailer:
    def __init__(self) -> None:
        print("[Mail] Mailer created on demand")

    def send(self, message: str) -> None:
        print(f"[Mail] Sending: {message}")


class UserService:
    def __init__(self, db: DBConnection, mailer: Mailer):
        self.db = db
        self.mailer = mailer

    def create_user(self, name: str) -> str:
        result = self.db.query(f"INSERT INTO users (name) VALUES ('{name}')")
        self.mailer.send(f"Welcome, {name}")
        return result


class DatabaseProvider(ServiceProvider):
    provides = ["db"]

    def register(self) -> None:
        self.app.bind("dsn", "postgres://localhost/app")
        self.app.bind("db", DBConnection, dependencies=["dsn"])

    def load(self) -> None:
        self.app.make("db").connect()


class MailProvider(ServiceProvider):
    provides = ["mailer"]
    is_deferred = True

    def register(self) -> None:
        self.app.bind("mailer", Mailer)

    def load(self) -> None:
        print("[Mail] Deferred provider booted")


class Page:
    """Host object receiving lazy accessors."""


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    container = Container()
    container.error_handler(ErrorHandler)
    container.register(DatabaseProvider).register(MailProvider)
    container.boot_providers()

    container.bind("users", UserService, dependencies=["db", "mailer"])
    print("Mail provider booted:", container.is_booted("MailProvider"))

    users = container.make("users")
    print(users.create_user("alice"))
    print("Mail provider booted:", container.is_booted("MailProvider"))
    print("Same instance:", users is container.make("users"))

    page = Page()
    container.share("users").with_others(page)
    print("Shared accessor:", getattr(page, "$users")() is users)
    container.unshare("users")
    print("Accessor removed:", not hasattr(page, "$users"))

    container.bind("a", lambda b: b)
    container.bind("b", lambda a: a)
    print("Circular resolution degrades to:", container.make("a"))


if __name__ == "__main__":
    main()
