"""Environment-driven settings for the badge service."""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# HTTP surface shared by the service and its clients
ERROR_HEADER = "Badge-Error"
GENERATE_ENDPOINT = "/generate/badge"
FREQUENCY_ENDPOINT = "/badge/freq"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _new_service_id() -> str:
    return uuid.uuid4().hex.upper()


@dataclass(frozen=True)
class ServiceConfig:
    name: str = "badge-generator"
    version: str = "0.0.1"
    description: str = "Generates personalized badges"
    template: str = "plain"
    template_path: Path | None = None
    font_family: str = "Helvetica"
    font_weight: float = 700
    log_level: str = "INFO"
    secret_key: str = "badge-generator"
    service_id: str = field(default_factory=_new_service_id)

    @classmethod
    def from_env(cls) -> ServiceConfig:
        """Build settings from BADGE_* variables, reading ``.env`` first."""
        load_dotenv()
        template_path = os.getenv("BADGE_TEMPLATE_PATH")
        weight = os.getenv("BADGE_FONT_WEIGHT", "700")
        try:
            font_weight = float(weight)
        except ValueError as exc:
            raise SystemExit(
                f"Invalid BADGE_FONT_WEIGHT '{weight}': expected a number"
            ) from exc
        return cls(
            name=os.getenv("BADGE_SERVICE_NAME", cls.name),
            version=os.getenv("BADGE_SERVICE_VERSION", cls.version),
            template=os.getenv("BADGE_TEMPLATE", cls.template),
            template_path=Path(template_path) if template_path else None,
            font_family=os.getenv("BADGE_FONT_FAMILY", cls.font_family),
            font_weight=font_weight,
            log_level=os.getenv("BADGE_LOG_LEVEL", cls.log_level),
            secret_key=os.getenv("FLASK_SECRET_KEY", cls.secret_key),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
