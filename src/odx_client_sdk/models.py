from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

Domain = list[list[list[Any]]]

DEFAULT_COMPANY_IDS = (1,)
DEFAULT_USER_ID = 1
DEFAULT_TIMEZONE = "Asia/Jakarta"
DEFAULT_LANG = "en_US"


class RequestContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_company_ids: tuple[int, ...] = DEFAULT_COMPANY_IDS
    user_id: int = Field(default=DEFAULT_USER_ID, serialization_alias="uid")
    tz: str = DEFAULT_TIMEZONE
    lang: str = DEFAULT_LANG


class KeywordRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    fields: list[str] | None = None
    order: str | None = None
    limit: int | None = None
    offset: int | None = None
    context: RequestContext = Field(default_factory=RequestContext)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class RemoteErrorPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: Any = None
    message: str = ""
    # Odoo sends a dict with name/message/debug; gateways may send a traceback string.
    data: Any = None

    @field_validator("message", mode="before")
    @classmethod
    def _coerce_message(cls, value: Any) -> str:
        return "" if value is None else str(value)


class ServerResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    jsonrpc: str | None = None
    id: str | int | None = None
    result: Any = None
    error: RemoteErrorPayload | None = None

    @field_validator("error", mode="before")
    @classmethod
    def _coerce_error(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, dict):
            return value or {"message": "Remote call failed"}
        return {"message": str(value) or "Remote call failed"}

    @property
    def ok(self) -> bool:
        return self.error is None
