from datetime import datetime

from pydantic import BaseModel, Field


class UserModel(BaseModel):  # type: ignore[misc]
    id: str = Field(..., alias="sub")
    expired_in: int = Field(
        ..., alias="exp"
    )  # timestamp when keycloak session expires
    username: str = Field(..., alias="preferred_username")
    session_id: str | None = Field(default=None, alias="sid")
    roles: list[str] = []

    def __init__(self, **kwargs) -> None:  # type: ignore[no-untyped-def]
        # Client roles of the authorized party
        kwargs["roles"] = (
            kwargs.get("resource_access", {})
            .get(kwargs.get("azp", ""), {})
            .get("roles", [])
        )

        super(UserModel, self).__init__(**kwargs)

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.username

    @property
    def expired_seconds(self) -> int:
        return self.expired_in - int(datetime.now().timestamp())

    def __hash__(self) -> int:
        return hash(self.id)
