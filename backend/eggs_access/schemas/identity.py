import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..auth.catalog import Role, parse_role

logger = logging.getLogger(__name__)


class Identity(BaseModel):
    """Authenticated principal as reported by the identity provider."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    email: str
    name: str | None = None


class ApplicationUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str
    role: Role
    is_active: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: object) -> Role:
        if not isinstance(value, (str, Role)):
            raise ValueError(f"Invalid role {value!r}")
        return parse_role(value)


class DirectoryRecord(BaseModel):
    """One row of the user directory listing."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    identity_id: str | None = Field(default=None, alias="mocha_user_id")
    email: str
    name: str
    role: str
    is_active: bool = True

    @field_validator("id", "identity_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        # The directory hands out integer primary keys
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("is_active", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> object:
        # SQLite rows carry 0/1 flags
        if value in (0, 1) and not isinstance(value, bool):
            return bool(value)
        return value

    def binds(self, identity: Identity) -> bool:
        return self.identity_id is not None and self.identity_id == identity.id

    def to_app_user(self) -> ApplicationUser:
        """Raises ValueError if the record carries an unknown role."""
        return ApplicationUser(
            id=self.id,
            email=self.email,
            name=self.name,
            role=parse_role(self.role),
            is_active=self.is_active,
        )


class UnreadableRecord(BaseModel):
    """A directory row that failed validation but still names its identity.

    Kept so the caller's own broken row is noticed instead of silently
    reading as "no application user".
    """

    identity_id: str
    reason: str

    def binds(self, identity: Identity) -> bool:
        return self.identity_id == identity.id


def parse_directory_rows(rows: Iterable[Any]) -> list[DirectoryRecord | UnreadableRecord]:
    records: list[DirectoryRecord | UnreadableRecord] = []
    for row in rows:
        try:
            records.append(DirectoryRecord.model_validate(row))
        except ValidationError as exc:
            identity_id = row.get("mocha_user_id") if isinstance(row, dict) else None
            logger.warning("skipping malformed directory row identity_id=%s: %s", identity_id, exc)
            if identity_id is not None and not isinstance(identity_id, bool):
                records.append(
                    UnreadableRecord(identity_id=str(identity_id), reason=str(exc))
                )
    return records
