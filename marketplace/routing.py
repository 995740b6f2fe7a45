import os
import pkgutil
from importlib import import_module

from fastapi import APIRouter

from marketplace.api.ws.connection import ClientConnection
from marketplace.api.ws.constants import PkgID, RSPCode
from marketplace.logging import logger
from marketplace.schemas.generic_typing import (
    HandlerCallableType,
    JsonSchemaType,
    ValidatorType,
)
from marketplace.schemas.request import RequestModel
from marketplace.schemas.response import ResponseModel
from marketplace.services.connection_lifecycle import ConnectionLifecycle


class PackageRouter:
    """
    Router for WebSocket package-based requests.

    Maps package IDs to handler coroutines and optional payload validators.
    Handlers receive the request, the caller's connection and the
    connection lifecycle, and may return None when they closed the
    connection themselves.
    """

    def __init__(self):
        self.handlers_registry: dict[PkgID, HandlerCallableType] = {}
        self.validators_registry: dict[
            PkgID, tuple[JsonSchemaType | None, ValidatorType | None]
        ] = {}

    def register(
        self,
        *pkg_ids: PkgID,
        json_schema: JsonSchemaType | None = None,
        validator_callback: ValidatorType | None = None,
    ):
        """
        Decorator registering a handler (and optional validator) for package IDs.

        Args:
            *pkg_ids (PkgID): One or more package IDs served by the handler.
            json_schema (JsonSchemaType | None): Schema for ``request.data``.
            validator_callback (ValidatorType | None): Callback applying the schema.

        Raises:
            ValueError: A different handler is already registered for one of
                the package IDs.
        """

        def decorator(func: HandlerCallableType):
            for pkg_id in pkg_ids:
                # Idempotent for module reloads
                if pkg_id in self.handlers_registry:
                    if self.handlers_registry[pkg_id] != func:
                        raise ValueError(
                            f"Different handler already registered for pkg_id {pkg_id}"
                        )
                    continue

                self.handlers_registry[pkg_id] = func
                self.validators_registry[pkg_id] = (
                    json_schema,
                    validator_callback,
                )

                logger.info(
                    f"Register {func.__module__}.{func.__name__} for PkgID: {pkg_id}"
                )

            return func

        return decorator

    def _has_handler(self, pkg_id: int) -> bool:
        return pkg_id in self.handlers_registry

    def _validate_request(self, request: RequestModel) -> ResponseModel | None:
        json_schema, validator_func = self.validators_registry[request.pkg_id]

        if validator_func is None or json_schema is None:
            return None

        if hasattr(json_schema, "model_json_schema"):
            json_schema = json_schema.model_json_schema()

        return validator_func(request, json_schema)

    async def handle_request(
        self,
        request: RequestModel,
        connection: ClientConnection,
        lifecycle: ConnectionLifecycle,
    ) -> ResponseModel | None:
        """
        Validate ``request`` and dispatch it to its handler.

        Returns:
            The response to send, or None if nothing should be sent.
        """
        if not self._has_handler(request.pkg_id):
            return ResponseModel.err_msg(
                request.pkg_id,
                request.req_id,
                msg=f"No handler found for pkg_id {request.pkg_id}",
                status_code=RSPCode.ERROR,
            )

        if validation_error := self._validate_request(request):
            return validation_error

        handler = self.handlers_registry[request.pkg_id]
        return await handler(request, connection, lifecycle)


pkg_router = PackageRouter()


_registered_http_modules: set[str] = set()
_registered_ws_modules: set[str] = set()


def collect_subrouters() -> APIRouter:
    """
    Collects all HTTP and WebSocket routers of the application.

    Every module under ``api/http`` and ``api/ws/consumers`` must expose a
    module-level ``router``.
    """
    main_router: APIRouter = APIRouter()

    package_dir = os.path.dirname(__file__)
    package_name = os.path.basename(package_dir)

    for _, module, _ in pkgutil.iter_modules([f"{package_dir}/api/http"]):
        api = import_module(f".{module}", package=f"{package_name}.api.http")
        main_router.include_router(api.router)

        if module not in _registered_http_modules:
            logger.info(f'Register "{module}" api')
            _registered_http_modules.add(module)

    for _, module, _ in pkgutil.iter_modules(
        [f"{package_dir}/api/ws/consumers"]
    ):
        ws_consumer = import_module(
            f".{module}", package=f"{package_name}.api.ws.consumers"
        )
        main_router.include_router(ws_consumer.router)

        if module not in _registered_ws_modules:
            logger.info(f'Register "{module}" websocket consumer')
            _registered_ws_modules.add(module)

    return main_router
