from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .directory import AuthResult


class AuthRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=256)
    password: str = Field(default="")

    @field_validator("username")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("username must not be blank")
        return v


class AuthResponse(BaseModel):
    authenticated: bool
    user: dict[str, str] = Field(default_factory=dict)
    dn: str = ""
    error: str = ""

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(
            authenticated=result.authenticated,
            user=dict(result.user),
            dn=result.dn,
            error=str(result.error) if result.error else "",
        )


class GroupsResponse(BaseModel):
    groups: list[str] = Field(default_factory=list)
