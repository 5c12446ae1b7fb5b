from __future__ import annotations


def build_allowed_origins(*, cors_origins: str | None) -> list[str]:
    allowed: set[str] = {
        "http://localhost:3000",
    }

    if cors_origins:
        for origin in [s.strip() for s in str(cors_origins).split(",") if s.strip()]:
            allowed.add(origin)

    return sorted(allowed)
