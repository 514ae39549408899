from __future__ import annotations

import argparse
import logging

from asset_graph.settings import configure_logging, settings

logger = logging.getLogger(__name__)


def cmd_version(_args: argparse.Namespace) -> int:
    from asset_graph import __version__

    print(__version__)
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    configure_logging()
    from asset_graph.graph import SQLiteGraphStore

    path = args.db or settings.database_path
    store = SQLiteGraphStore(path)
    try:
        store.ensure_schema()
    finally:
        store.close()
    logger.info("schema ready at %s", path)
    print(path)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from asset_graph.server import serve

    serve(database_path=args.db, host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="asset-graph")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version").set_defaults(func=cmd_version)

    init = sub.add_parser("init-db", help="Create the SQLite schema")
    init.add_argument("--db", default=None, help="SQLite path (default: ASSET_GRAPH_DATABASE_PATH)")
    init.set_defaults(func=cmd_init_db)

    srv = sub.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--db", default=None)
    srv.add_argument("--host", default=None)
    srv.add_argument("--port", type=int, default=None)
    srv.set_defaults(func=cmd_serve)

    return p


def app(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    app()
