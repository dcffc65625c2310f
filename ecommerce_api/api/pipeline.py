"""Request interceptor chain.

An ordered list of interceptors, each an async callable taking the request
and a ``call_next`` continuation. An interceptor either continues the chain
by awaiting ``call_next(request)`` or short-circuits by returning its own
response. The chain itself is framework-agnostic; ``PipelineMiddleware``
mounts it into the ASGI app as a single middleware.
"""

from collections.abc import Awaitable, Callable, Sequence
from functools import partial

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

CallNext = Callable[[Request], Awaitable[Response]]
Interceptor = Callable[[Request, CallNext], Awaitable[Response]]


class InterceptorChain:
    """Runs interceptors in order, then the endpoint.

    Example:
        chain = InterceptorChain([RequestIdInterceptor(), ErrorInterceptor()])
        response = await chain(request, endpoint)
    """

    def __init__(self, interceptors: Sequence[Interceptor] = ()) -> None:
        self.interceptors = list(interceptors)

    def add(self, interceptor: Interceptor) -> "InterceptorChain":
        """Append an interceptor; it runs after those already added."""
        self.interceptors.append(interceptor)
        return self

    async def __call__(self, request: Request, endpoint: CallNext) -> Response:
        return await self._dispatch(0, endpoint, request)

    async def _dispatch(self, index: int, endpoint: CallNext, request: Request) -> Response:
        if index == len(self.interceptors):
            return await endpoint(request)
        call_next = partial(self._dispatch, index + 1, endpoint)
        return await self.interceptors[index](request, call_next)


class PipelineMiddleware(BaseHTTPMiddleware):
    """Mounts an InterceptorChain in front of the application."""

    def __init__(self, app: ASGIApp, chain: InterceptorChain) -> None:
        super().__init__(app)
        self.chain = chain

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        return await self.chain(request, call_next)
