from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from namewire.domain import IInjector


def create_fastapi_dependency(injector: IInjector, name: str) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves a name from the injector.

    The value is built on first use and shared afterwards, like any other
    resolution from the injector.

    Args:
        injector: The injector to resolve from.
        name: The registered name to resolve; a trailing ``?`` makes it optional.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> injector = Injector()
        >>> injector.register("users", UserRepository)
        >>>
        >>> get_users = create_fastapi_dependency(injector, "users")
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_users)):
        ...     return await repo.get_all()
    """

    def dependency() -> Any:
        """Resolve the dependency from the injector."""
        return injector.resolve(name)

    return dependency


def create_request_dependency(name: str) -> Callable[[Request], Any]:
    """Create a FastAPI dependency that resolves from the request's injector.

    Requires the InjectorMiddleware to be installed.

    Args:
        name: The registered name to resolve.

    Returns:
        A callable that resolves from ``request.state.injector``.

    Example:
        >>> app.add_middleware(InjectorMiddleware, injector=injector)
        >>>
        >>> get_settings = create_request_dependency("settings")
        >>>
        >>> @app.get("/health")
        >>> async def health(settings: Settings = Depends(get_settings)):
        ...     return {"env": settings.env}
    """

    def request_dependency(request: Request) -> Any:
        """Resolve from the request's injector."""
        if not hasattr(request.state, "injector"):
            raise RuntimeError("Request does not have an injector. Did you forget to add InjectorMiddleware?")
        request_injector: IInjector = request.state.injector
        return request_injector.resolve(name, context=f"{request.method} {request.url.path}")

    return request_dependency


class InjectorMiddleware(BaseHTTPMiddleware):
    """Middleware that exposes the injector on every request.

    The injector is accessible via `request.state.injector`.

    Attributes:
        injector: The injector shared by all requests.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(InjectorMiddleware, injector=injector)
    """

    def __init__(self, app: FastAPI, injector: IInjector):
        """Initialize the middleware with an injector.

        Args:
            app: The FastAPI/Starlette application.
            injector: The injector to expose.
        """
        super().__init__(app)
        self.injector = injector

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Attach the injector to the request and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        request.state.injector = self.injector
        return await call_next(request)
