"""
WebSocket handlers for the session a connection was registered with.

Every handler receives the caller's own connection, so a client can only
ever read, refresh or terminate the session bound to the socket it speaks on.
"""

from marketplace.api.ws.connection import ClientConnection
from marketplace.api.ws.constants import ClientEvent, PkgID
from marketplace.api.ws.validation import validator
from marketplace.constants import MSG_SESSION_TERMINATED
from marketplace.logging import logger
from marketplace.routing import pkg_router
from marketplace.schemas.generic_typing import JsonSchemaType
from marketplace.schemas.request import RequestModel
from marketplace.schemas.response import ResponseModel
from marketplace.schemas.session import UserSessionResponse
from marketplace.services.connection_lifecycle import ConnectionLifecycle
from marketplace.utils.error_handler import handle_ws_errors

MSG_SESSION_NOT_FOUND = "Session not found"
MSG_SESSION_NOT_BOUND = "Session is not bound to this connection"


@pkg_router.register(PkgID.REQUEST_SESSION_DATA)
@handle_ws_errors
async def request_session_data_handler(
    request: RequestModel,
    connection: ClientConnection,
    lifecycle: ConnectionLifecycle,
) -> ResponseModel:
    """
    Return the projection of the caller's session.

    Response Data: ``UserSessionResponse`` fields, or an error response
    ``"Session not found"`` when the store no longer holds the session.
    """
    session = None
    if connection.session_id:
        session = await lifecycle.sessions.get_session(connection.session_id)

    if session is None:
        return ResponseModel.err_msg(
            request.pkg_id, request.req_id, msg=MSG_SESSION_NOT_FOUND
        )

    return ResponseModel.ok_msg(
        request.pkg_id,
        request.req_id,
        data=UserSessionResponse.from_session(session).model_dump(mode="json"),
    )


@pkg_router.register(PkgID.RE_REGISTER_SESSION)
async def re_register_session_handler(
    request: RequestModel,
    connection: ClientConnection,
    lifecycle: ConnectionLifecycle,
) -> None:
    """
    Validate the caller's session again and refresh its registry entries.

    The outcome is reported through the ``Registered`` or ``Error`` event,
    so no response frame is sent.
    """
    await lifecycle.register(connection, connection.session_id)


force_logout_local_schema: JsonSchemaType = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "session_id": {"type": "string", "minLength": 1},
    },
    "required": ["session_id"],
    "additionalProperties": False,
}


@pkg_router.register(
    PkgID.FORCE_LOGOUT_LOCAL,
    json_schema=force_logout_local_schema,
    validator_callback=validator,
)
async def force_logout_local_handler(
    request: RequestModel,
    connection: ClientConnection,
    lifecycle: ConnectionLifecycle,
) -> ResponseModel | None:
    """
    Terminate the caller's session on this connection.

    Request Data:
        {"session_id": str}

    Only honoured when this connection is the one registered for
    ``session_id``; the socket is then sent ``ForceLogout`` and closed.
    """
    session_id = request.data["session_id"]

    if lifecycle.registry.connection_for(session_id) is not connection:
        logger.warning(
            f"Connection {connection.connection_id} asked to log out "
            f"session {session_id} it is not bound to"
        )
        return ResponseModel.err_msg(
            request.pkg_id, request.req_id, msg=MSG_SESSION_NOT_BOUND
        )

    await connection.send_event(ClientEvent.FORCE_LOGOUT, MSG_SESSION_TERMINATED)
    await lifecycle.close(connection, reason=MSG_SESSION_TERMINATED)
    return None
