#!/usr/bin/env python3
"""Print how often each name has been requested from the badge service."""

from __future__ import annotations

import argparse
import os

import httpx
from dotenv import load_dotenv

from badge_client import DEFAULT_SERVER, BadgeClient, ServiceError, table


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Show badge request frequency")
    parser.add_argument(
        "--server",
        default=os.getenv("BADGE_SERVER", DEFAULT_SERVER),
        help="Badge service URL (defaults to BADGE_SERVER from the environment/.env).",
    )
    args = parser.parse_args(argv)

    try:
        counts = BadgeClient(server=args.server).badge_frequency()
    except ServiceError as exc:
        print(f"error processing your request: {exc}")
        return 1
    except httpx.ConnectError:
        print("sorry no frequency-service services were found")
        return 1
    except httpx.HTTPError as exc:
        print(f"error: {exc}")
        return 1

    if not counts:
        print("no badge generation requests seen")
        return 0
    rows = [
        {"name": name, "count": count}
        for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]
    print(table(rows))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
