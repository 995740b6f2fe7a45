from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from marketplace.api.ws.constants import ClientEvent, PkgID, RSPCode


class ResponseModel(BaseModel):  # type: ignore[misc]
    pkg_id: PkgID = Field(frozen=True)
    req_id: UUID = Field(frozen=True)
    status_code: RSPCode | None = RSPCode.OK
    data: dict[str, Any] | list[Any] | None = None

    @classmethod
    def ok_msg(
        cls,
        pkg_id: PkgID,
        req_id: UUID,
        data: dict[str, Any] | None = None,
        msg: str | None = None,
    ) -> "ResponseModel":
        if data is None:
            data = {}
        if msg:
            data["msg"] = msg
        return cls(
            pkg_id=pkg_id, req_id=req_id, status_code=RSPCode.OK, data=data
        )

    @classmethod
    def err_msg(
        cls,
        pkg_id: PkgID,
        req_id: UUID,
        data: dict[str, Any] | None = None,
        msg: str | None = None,
        status_code: RSPCode | None = RSPCode.ERROR,
    ) -> "ResponseModel":
        if data is None:
            data = {}
        if msg:
            data["msg"] = msg
        return cls(
            pkg_id=pkg_id, req_id=req_id, status_code=status_code, data=data
        )


class ServerEventModel(BaseModel):  # type: ignore[misc]
    """Frame pushed by the server outside of the request/response flow."""

    event: ClientEvent = Field(frozen=True)
    data: Any = None
