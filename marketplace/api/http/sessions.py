"""Administrative session endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from marketplace.dependencies import (
    SessionRepoDep,
    SessionTerminatorDep,
    require_roles,
)
from marketplace.logging import logger
from marketplace.utils.error_handler import handle_http_errors

router = APIRouter(prefix="/sessions", tags=["sessions"])


class ForceLogoutResponse(BaseModel):
    """Outcome of a forced logout."""

    session_id: str
    revoked: bool
    signalled: bool


@router.post(
    "/{session_id}/force-logout",
    response_model=ForceLogoutResponse,
    summary="Terminate a session",
    dependencies=[Depends(require_roles("admin"))],
)
@handle_http_errors
async def force_logout(
    session_id: str,
    sessions: SessionRepoDep,
    terminator: SessionTerminatorDep,
) -> ForceLogoutResponse:
    """
    Revoke a session and signal ``ForceLogout`` to its live connection.

    The session is revoked first, so a client that reconnects or asks to
    be re-registered after the signal is rejected.
    """
    revoked = await sessions.revoke_session(session_id)
    signalled = await terminator.force_logout(session_id)

    logger.info(
        f"Force logout of session {session_id}: "
        f"revoked={revoked} signalled={signalled}"
    )
    return ForceLogoutResponse(
        session_id=session_id, revoked=revoked, signalled=signalled
    )
