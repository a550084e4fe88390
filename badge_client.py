"""Thin httpx client for the badge service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from badge_config import ERROR_HEADER, FREQUENCY_ENDPOINT, GENERATE_ENDPOINT

# Default timeout (in seconds) for badge service requests.
DEFAULT_TIMEOUT = 30
DEFAULT_SERVER = "http://127.0.0.1:4000"


class ServiceError(RuntimeError):
    """The service answered but reported a failure."""


@dataclass
class BadgeClient:
    """Badge service helper bound to one server."""

    server: str = DEFAULT_SERVER
    timeout: float = DEFAULT_TIMEOUT
    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        base = (self.server or "").rstrip("/")
        if not base:
            raise RuntimeError("Badge service URL is required.")
        if "://" not in base:
            base = f"http://{base}"
        self.server = base

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.server,
            timeout=self.timeout,
            transport=self.transport,
        )

    def _check(self, response: httpx.Response) -> httpx.Response:
        error = response.headers.get(ERROR_HEADER)
        if error:
            raise ServiceError(error)
        response.raise_for_status()
        return response

    def generate_badge(
        self,
        name: str,
        company: str = "",
        output: str = "pdf",
    ) -> bytes:
        with self._client() as client:
            response = client.post(
                GENERATE_ENDPOINT,
                params={"format": output},
                json={"name": name, "company": company},
            )
        return self._check(response).content

    def badge_frequency(self) -> dict[str, int]:
        with self._client() as client:
            response = client.get(FREQUENCY_ENDPOINT)
        return self._check(response).json()

    def service_query(
        self,
        verb: str,
        name: str = "",
        service_id: str = "",
    ) -> dict[str, Any] | None:
        """Return the service's reply, or ``None`` when it does not match."""
        with self._client() as client:
            response = client.get(service_path(verb, name, service_id))
        if response.status_code == 404:
            return None
        return self._check(response).json()


def service_path(verb: str, name: str = "", service_id: str = "") -> str:
    chunks = ["srv", verb.lower()]
    if name:
        chunks.append(name.upper())
        if service_id:
            chunks.append(service_id.upper())
    return "/" + "/".join(chunks)


def table(rows: list[dict[str, Any]]) -> str:
    """Format ``rows`` as a plain-text table with one column per key."""

    if not rows:
        return ""
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    cells = [[str(row.get(col, "")) for col in columns] for row in rows]
    widths = [
        max(len(col), *(len(line[i]) for line in cells))
        for i, col in enumerate(columns)
    ]
    out = [
        "  ".join(col.ljust(widths[i]) for i, col in enumerate(columns)),
        "  ".join("-" * w for w in widths),
    ]
    for line in cells:
        out.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(line)))
    return "\n".join(out)
