"""Local dev entrypoint: serve ./resources with auto-reload."""

from __future__ import annotations

import os

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "entityrest.api.app:create_app_from_env",
        factory=True,
        host="127.0.0.1",
        port=int(os.environ.get("ENTITYREST_PORT", "8000")),
        reload=True,
        log_level=os.environ.get("ENTITYREST_LOG_LEVEL", "debug").lower(),
    )
