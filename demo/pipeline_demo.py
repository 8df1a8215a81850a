import logging
from collections.abc import Callable
from typing import Any

from microioc import AppServiceProvider, Container, Kernel

Request = dict[str, Any]
Next = Callable[[Request], Any]


class StartSession:
    def handle(self, request: Request, next_: Next) -> Any:
        print("-> start session")
        request["session"] = {"user": request.get("user")}
        return next_(request)

    def terminate(self, request: Request, next_: Next) -> Any:
        print("<- save session")
        request.pop("session", None)
        return next_(request)


class Authenticate:
    def handle(self, request: Request, next_: Next) -> Any:
        print("-> authenticate")
        if request["session"]["user"] is None:
            print("   rejected, pipeline halts here")
            request["status"] = 401
            return request
        return next_(request)

    def terminate(self, request: Request, next_: Next) -> Any:
        print("<- forget user")
        return next_(request)


def stamp(request: Request, next_: Next) -> Any:
    request["stamped"] = True
    return next_(request)


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    container = Container()
    container.register(AppServiceProvider)
    container.boot_providers()

    kernel: Kernel = container.make("Kernel")
    kernel.set_middleware([StartSession, Authenticate, stamp])

    response = kernel.handle({"path": "/", "user": "alice"}, lambda request: {**request, "status": 200})
    print("handled:", response)
    kernel.terminate(response, lambda request: print("terminated:", request))

    pending = kernel.handle({"path": "/admin"})
    print("anonymous request:", pending.state.value, pending.result)


if __name__ == "__main__":
    main()
