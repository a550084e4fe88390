#!/usr/bin/env python3
"""Query and start badge services."""

from __future__ import annotations

import argparse
import logging
import multiprocessing
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

import httpx
from dotenv import load_dotenv

from badge_client import DEFAULT_SERVER, BadgeClient, table
from badge_config import ServiceConfig, configure_logging

logger = logging.getLogger(__name__)


def gather(
    servers: Sequence[str],
    verb: str,
    name: str = "",
    service_id: str = "",
    transport: httpx.BaseTransport | None = None,
) -> list[dict[str, Any]]:
    """Ask every server and collect the replies of the matching services.

    Servers that cannot be reached or that fail are skipped.
    """

    def _query(server: str) -> dict[str, Any] | None:
        try:
            return BadgeClient(server=server, transport=transport).service_query(
                verb, name, service_id
            )
        except (httpx.HTTPError, RuntimeError, ValueError) as exc:
            logger.debug("skipping %s: %s", server, exc)
            return None

    if not servers:
        return []
    with ThreadPoolExecutor(max_workers=min(len(servers), 8)) as pool:
        replies = list(pool.map(_query, servers))
    return [reply for reply in replies if reply is not None]


def sort_by_version(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(
        rows,
        key=lambda row: f"{row.get('name', '')} {row.get('version', '')}",
        reverse=True,
    )


def flatten_status(reply: dict[str, Any]) -> dict[str, Any]:
    """Merge the first endpoint's stats into the service row."""

    row = {k: v for k, v in reply.items() if k != "stats"}
    stats = list(reply.get("stats") or [])
    if stats:
        endpoint = dict(stats[0])
        endpoint.pop("name", None)
        for key in ("processing_time", "average_processing_time"):
            if key in endpoint:
                endpoint[key] = f"{float(endpoint[key]) * 1000:.2f} ms"
        row.update(endpoint)
    return row


def _run_query(args: argparse.Namespace) -> int:
    replies = gather(args.server, args.command, args.name, args.id)
    if args.command == "status":
        rows = [flatten_status(reply) for reply in replies]
        rows.sort(key=lambda row: row.get("num_requests", 0), reverse=True)
    else:
        rows = sort_by_version(replies)
        if args.command == "info":
            rows = [
                {**row, "endpoints": ", ".join(row.get("endpoints") or [])}
                for row in rows
            ]
    if not rows:
        print("no services found")
        return 0
    print(table(rows))
    return 0


def _run_start(args: argparse.Namespace) -> int:
    from badge_service_web import run_web_app

    configure_logging(ServiceConfig.from_env().log_level)
    processes: list[multiprocessing.Process] = []
    for i in range(args.count):
        process = multiprocessing.Process(
            target=run_web_app,
            args=(ServiceConfig.from_env(), args.host, args.port + i),
            daemon=True,
        )
        process.start()
        processes.append(process)
    # wait forever
    for process in processes:
        process.join()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="service-adm (ping|info|status|schema|start) [--name name] [--id id]"
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-n", "--name",
        default="",
        help="service name to filter on",
    )
    common.add_argument(
        "--id",
        default="",
        help="service id to filter on",
    )
    common.add_argument(
        "--server",
        action="append",
        default=None,
        help=(
            "Badge service URL (repeatable, defaults to BADGE_SERVER from the "
            "environment/.env)."
        ),
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("ping", parents=[common], help="pings services")
    sub.add_parser("info", parents=[common], help="get service info")
    sub.add_parser("status", parents=[common], help="get service status")
    sub.add_parser("schema", parents=[common], help="get services schema")

    start = sub.add_parser("start", help="start badge service(s)")
    start.add_argument(
        "--count",
        type=int,
        default=1,
        help="number of services to start",
    )
    start.add_argument("--host", default="127.0.0.1")
    start.add_argument(
        "--port",
        type=int,
        default=4000,
        help="first port; each extra service takes the next one",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    if args.command == "start":
        return _run_start(args)
    if args.command == "schema":
        print("not implemented")
        return 0
    if not args.server:
        args.server = [os.getenv("BADGE_SERVER", DEFAULT_SERVER)]
    return _run_query(args)


if __name__ == "__main__":
    raise SystemExit(main())
