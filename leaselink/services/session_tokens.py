from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from jose import JWTError, jwt

DEFAULT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    role: str

    def as_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email, "role": self.role}


def issue(
    identity: Identity,
    secret: str,
    ttl: int,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    now: Optional[float] = None,
) -> str:
    """
    Sign ``identity`` into a JWT that expires ``ttl`` seconds after ``now``.

    IMPORTANT: "sub" has to be a string, otherwise jose refuses the token on
    decode; the numeric id travels separately in "id".
    """
    issued_at = int(time.time() if now is None else now)
    payload: Dict[str, Any] = {
        "sub": str(identity.id),
        "id": identity.id,
        "email": identity.email,
        "role": identity.role,
        "iat": issued_at,
        "exp": issued_at + int(ttl),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify(
    token: Optional[str],
    secret: str,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    now: Optional[float] = None,
) -> Optional[Identity]:
    """Return the identity in ``token`` or ``None`` when malformed, forged or expired."""
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_exp": False},
        )
    except JWTError:
        return None

    exp = payload.get("exp")
    current = time.time() if now is None else now
    try:
        if exp is None or int(exp) <= int(current):
            return None
        return Identity(id=int(payload["id"]), email=str(payload["email"]), role=str(payload["role"]))
    except (KeyError, TypeError, ValueError):
        return None
