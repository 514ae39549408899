from __future__ import annotations

import uvicorn

from .api import create_app
from .graph import SQLiteGraphStore
from .settings import configure_logging, settings


def serve(*, database_path: str | None = None, host: str | None = None, port: int | None = None) -> None:
    configure_logging()

    store = SQLiteGraphStore(database_path or settings.database_path)
    store.ensure_schema()
    app = create_app(store)

    config = uvicorn.Config(
        app,
        host=host or settings.bind_host,
        port=port or settings.bind_port,
        log_level=(settings.log_level or "info").lower(),
    )
    server = uvicorn.Server(config)

    try:
        server.run()
    finally:
        store.close()


def main() -> None:
    serve()


if __name__ == "__main__":
    main()
