from collections.abc import Awaitable
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Optional,
    Protocol,
    Union,
)

from marketplace.schemas.request import RequestModel

if TYPE_CHECKING:
    from marketplace.api.ws.connection import ClientConnection
    from marketplace.schemas.response import ResponseModel
    from marketplace.services.connection_lifecycle import ConnectionLifecycle


class PydanticModel(Protocol):
    """Protocol for Pydantic models with model_json_schema method."""

    def model_json_schema(self) -> dict[str, Any]: ...


# Type definitions
JsonSchemaType = (
    dict[str, Union[str, int, float, bool, list[Any], "JsonSchemaType"]]
    | type[PydanticModel]
)
ValidatorType = Callable[
    [RequestModel, JsonSchemaType], Optional["ResponseModel"]
]
HandlerCallableType = Callable[
    [RequestModel, "ClientConnection", "ConnectionLifecycle"],
    Awaitable[Optional["ResponseModel"]],
]
