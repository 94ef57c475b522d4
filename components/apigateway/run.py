from __future__ import annotations

import uvicorn

from .settings import AppSettings


def main() -> None:
    settings = AppSettings()
    uvicorn.run(
        "components.apigateway.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
