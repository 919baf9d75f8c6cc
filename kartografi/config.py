"""Runtime settings.

Values come from the process environment. A `.env` file is read first (path
in KARTOGRAFI_ENV_FILE, default `.env`); it never overrides variables that
are already set.
"""
from __future__ import annotations

import dataclasses
import os


def _parse_dotenv(path: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for raw in fh:
                line = raw.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, val = line.split("=", 1)
                key = key.strip()
                if key.startswith("export "):
                    key = key[len("export "):].strip()
                val = val.strip()
                if len(val) >= 2 and val[0] == val[-1] and val[0] in ("\"", "'"):
                    val = val[1:-1]
                pairs[key] = val
    except FileNotFoundError:
        return {}
    return pairs


def load_env_file(path: str = ".env", override: bool = False) -> None:
    for k, v in _parse_dotenv(path).items():
        if override or k not in os.environ:
            os.environ[k] = v


@dataclasses.dataclass(frozen=True)
class Settings:
    rest_countries_base: str = "https://restcountries.com/v3.1"
    country_cache_ttl_s: float = 3600.0
    upstream_timeout_s: float = 10.0
    mongo_uri: str | None = None
    mongo_db: str | None = None
    port: int = 5000
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "Settings":
        load_env_file(os.environ.get("KARTOGRAFI_ENV_FILE") or ".env")
        return Settings(
            rest_countries_base=(os.environ.get("REST_COUNTRIES_BASE") or "https://restcountries.com/v3.1").rstrip("/"),
            country_cache_ttl_s=float(os.environ.get("COUNTRY_CACHE_TTL_S") or 3600),
            upstream_timeout_s=float(os.environ.get("UPSTREAM_TIMEOUT_S") or 10),
            mongo_uri=os.environ.get("MONGO_URI") or None,
            mongo_db=os.environ.get("MONGO_DB") or None,
            port=int(os.environ.get("PORT") or 5000),
            log_level=(os.environ.get("LOG_LEVEL") or "INFO").strip().upper(),
        )
