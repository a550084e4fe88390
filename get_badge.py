#!/usr/bin/env python3
"""Request a badge from the badge service and save it locally."""

from __future__ import annotations

import argparse
import os
import time
from pathlib import Path

import httpx
from dotenv import load_dotenv

from badge_client import DEFAULT_SERVER, BadgeClient, ServiceError


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Generate a badge")
    parser.add_argument(
        "--server",
        default=os.getenv("BADGE_SERVER", DEFAULT_SERVER),
        help="Badge service URL (defaults to BADGE_SERVER from the environment/.env).",
    )
    parser.add_argument("-n", "--name", required=True)
    parser.add_argument("-c", "--company", default="")
    parser.add_argument(
        "-o", "--output-dir",
        default="temp",
        help="Directory for the generated file (default: temp).",
    )
    parser.add_argument("-f", "--format", choices=["pdf", "png"], default="pdf")

    args = parser.parse_args(argv)
    client = BadgeClient(server=args.server)

    try:
        data = client.generate_badge(args.name, args.company, args.format)
    except ServiceError as exc:
        print(f"error processing your request: {exc}")
        return 1
    except httpx.ConnectError:
        print("sorry no generator-service was found")
        return 1
    except httpx.HTTPError as exc:
        print(f"error: {exc}")
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{int(time.time() * 1000)}.{args.format}"
    path.write_bytes(data)
    print(f"wrote badge to ./{path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
