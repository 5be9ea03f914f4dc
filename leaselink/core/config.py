from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv

# Load .env from the project root
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}
DEV_ENVS = {"dev", "development", "local", "test"}
PROD_ENVS = {"prod", "production"}

DEFAULT_DEV_SECRET = "dev-secret"
DEFAULT_SESSION_TTL_SECONDS = 60 * 60 * 24 * 7  # 7 days
DEFAULT_DEV_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _flag(environ: Mapping[str, str], name: str, default: str) -> bool:
    return environ.get(name, default).strip().lower() in _TRUTHY


def _int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Invalid {name}: {raw}") from exc


@dataclass(frozen=True)
class Settings:
    env: str = "dev"
    database_url: str = "sqlite:///./leaselink.db"

    jwt_secret: str = DEFAULT_DEV_SECRET
    jwt_algorithm: str = "HS256"
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    session_cookie_secure: bool = False

    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_DEV_CORS_ORIGINS))
    log_level: str = "INFO"
    seed_demo_data: bool = False

    @property
    def is_dev(self) -> bool:
        return self.env in DEV_ENVS

    @property
    def is_prod(self) -> bool:
        return self.env in PROD_ENVS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ

        env = environ.get("ENV", "dev").strip().lower() or "dev"
        is_dev = env in DEV_ENVS

        jwt_secret = environ.get("JWT_SECRET", "").strip()
        if not jwt_secret:
            if not is_dev:
                raise RuntimeError("JWT_SECRET not configured.")
            jwt_secret = DEFAULT_DEV_SECRET

        ttl = _int(environ, "SESSION_TTL_SECONDS", DEFAULT_SESSION_TTL_SECONDS)
        if ttl <= 0:
            raise RuntimeError(f"Invalid SESSION_TTL_SECONDS: {ttl}")

        cors_env = environ.get("CORS_ORIGINS", "")
        cors_origins = [o.strip() for o in cors_env.split(",") if o.strip() and o.strip() != "*"]
        if not cors_origins and is_dev:
            cors_origins = list(DEFAULT_DEV_CORS_ORIGINS)

        return cls(
            env=env,
            database_url=environ.get("DATABASE_URL", "sqlite:///./leaselink.db").strip(),
            jwt_secret=jwt_secret,
            jwt_algorithm=environ.get("JWT_ALGORITHM", "HS256").strip() or "HS256",
            session_ttl_seconds=ttl,
            session_cookie_secure=_flag(environ, "SESSION_COOKIE_SECURE", "0" if is_dev else "1"),
            cors_origins=cors_origins,
            log_level=environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            seed_demo_data=_flag(environ, "SEED_DEMO_DATA", "0"),
        )
