from __future__ import annotations

import uvicorn

from .settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "admin_api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(settings.port),
        log_config=None,
    )


if __name__ == "__main__":
    main()
