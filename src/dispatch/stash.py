"""Dispatch façade for protocol requests.

This module exposes Stash, the SDK entry point that forwards a request to
the engine configured for its resource and returns the engine's response
unchanged.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar, Union

from core.config import StashConfig
from core.errors import StashArgumentError, StashConfigError, StashEngineError, StashError
from core.logging_config import get_logger
from core.types import StashResponse
from dispatch.engine_registry import EngineRegistry
from engines.memory_engine import MemoryEngine
from engines.storage_engine import StorageEngine
from protocol.base_request import StashRequest
from protocol.delete_request import DeleteRequest
from protocol.get_request import GetRequest
from protocol.options_request import OptionsRequest
from protocol.patch_request import PatchRequest
from protocol.post_request import PostRequest
from protocol.put_request import PutRequest

_LOGGER = get_logger(__name__)

RequestT = TypeVar("RequestT", bound=StashRequest)
RequestInput = Union[RequestT, Callable[[RequestT], Any], None]


class Stash:
    """Primary SDK entry point for dispatching requests to engines."""

    def __init__(
        self,
        config: StashConfig | None = None,
        engines: Iterable[StorageEngine] | None = None,
    ) -> None:
        """Create a dispatch façade.

        Args:
            config: Optional runtime configuration; read from the
                environment when omitted.
            engines: Engine instances to register. A MemoryEngine is
                registered when none are given.
        """
        self._config = config or StashConfig.from_env()
        self._registry = EngineRegistry(self._config)
        engine_list = list(engines or [])
        for engine in engine_list or [MemoryEngine()]:
            self._registry.register(engine)

    @property
    def config(self) -> StashConfig:
        """Return the runtime configuration."""
        return self._config

    def register(self, engine: StorageEngine) -> "Stash":
        """Register an additional engine instance."""
        self._registry.register(engine)
        return self

    def engine(self, resource: str | None = None) -> StorageEngine:
        """Return the engine a resource dispatches to."""
        return self._registry.resolve(resource)

    async def dispatch(self, request: StashRequest) -> StashResponse:
        """Forward a request to its resource's engine.

        The request is checked for dispatch-time requirements, then handed
        to the engine unchanged. No retry is attempted. Domain errors raised
        by the engine propagate as-is; any other exception is wrapped in
        StashEngineError with the original chained as its cause.

        Args:
            request: Configured request.

        Returns:
            The engine's response, unmodified.

        Raises:
            StashArgumentError: If ``request`` is not a request instance.
            StashConfigError: If the request is incomplete or no engine resolves.
            StashEngineError: If the engine fails or returns something other
                than a response.
        """
        if not isinstance(request, StashRequest):
            raise StashArgumentError(
                "Invalid 'request' argument: expected a request instance, "
                f"got {type(request).__name__}."
            )
        request.validate_dispatch()
        engine = self._registry.resolve(request.resource)
        handler = getattr(engine, request.method, None)
        if handler is None:
            raise StashConfigError(
                f"Engine '{engine.name}' does not handle '{request.method}' requests."
            )
        log_fields = {"method": request.method, "resource": request.resource, "engine": engine.name}
        _LOGGER.info("request_dispatched", **log_fields)
        try:
            response = await handler(request)
        except StashError as error:
            _LOGGER.error("request_failed", error=str(error), **log_fields)
            raise
        except Exception as error:
            _LOGGER.error(
                "request_failed",
                error=str(error),
                error_type=type(error).__name__,
                **log_fields,
            )
            raise StashEngineError(
                f"Engine '{engine.name}' failed a '{request.method}' request "
                f"for resource '{request.resource}': {error}"
            ) from error
        if not isinstance(response, StashResponse):
            raise StashEngineError(
                f"Engine '{engine.name}' returned {type(response).__name__} for a "
                f"'{request.method}' request; engines must return a StashResponse."
            )
        _LOGGER.info(
            "request_completed",
            returned=response.returned,
            total=response.total,
            affected=response.affected,
            **log_fields,
        )
        return response

    async def get(self, request: RequestInput[GetRequest] = None) -> StashResponse:
        """Dispatch a GET request, or one configured by a callback."""
        return await self.dispatch(_build_request(GetRequest, request))

    async def post(self, request: RequestInput[PostRequest] = None) -> StashResponse:
        """Dispatch a POST request, or one configured by a callback."""
        return await self.dispatch(_build_request(PostRequest, request))

    async def put(self, request: RequestInput[PutRequest] = None) -> StashResponse:
        """Dispatch a PUT request, or one configured by a callback."""
        return await self.dispatch(_build_request(PutRequest, request))

    async def patch(self, request: RequestInput[PatchRequest] = None) -> StashResponse:
        """Dispatch a PATCH request, or one configured by a callback."""
        return await self.dispatch(_build_request(PatchRequest, request))

    async def delete(self, request: RequestInput[DeleteRequest] = None) -> StashResponse:
        """Dispatch a DELETE request, or one configured by a callback."""
        return await self.dispatch(_build_request(DeleteRequest, request))

    async def options(self, request: RequestInput[OptionsRequest] = None) -> StashResponse:
        """Dispatch an OPTIONS request, or one configured by a callback."""
        return await self.dispatch(_build_request(OptionsRequest, request))


def _build_request(request_type: type[RequestT], value: object) -> RequestT:
    if isinstance(value, request_type):
        return value
    if value is None:
        return request_type()
    if callable(value) and not isinstance(value, (type, StashRequest)):
        request = request_type()
        value(request)
        return request
    raise StashArgumentError(
        f"Invalid 'request' argument: expected a {request_type.__name__} or a callback "
        f"configuring one, got {type(value).__name__}."
    )
