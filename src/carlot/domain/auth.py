from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class AuthEventType(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    TOKEN_REFRESHED = "token_refreshed"


@dataclass(frozen=True, slots=True)
class AuthUser:
    id: str
    email: str
    user_metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AuthSession:
    access_token: str
    refresh_token: str
    expires_at: datetime
    user: AuthUser


@dataclass(frozen=True, slots=True)
class SignUpProfile:
    full_name: str
    phone: str | None = None

    def as_metadata(self) -> dict[str, Any]:
        return {"full_name": self.full_name, "phone": self.phone or None}


@dataclass(frozen=True, slots=True)
class AuthEvent:
    type: AuthEventType
    session: AuthSession | None = None
    user_id: str | None = None

    @property
    def subject(self) -> str | None:
        if self.session is not None:
            return self.session.user.id
        return self.user_id
