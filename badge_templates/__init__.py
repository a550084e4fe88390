"""Template loader for badge designs."""

from __future__ import annotations

from importlib import import_module
from pathlib import Path
from typing import Iterable

from .base import BadgeTemplate, TemplateAsset

_TEMPLATE_NAMES = {"image", "plain"}


def get_template(
    name: str,
    asset_path: Path | None = None,
) -> BadgeTemplate:
    """Instantiate the template implementation for ``name``."""

    key = name.lower()
    if key not in _TEMPLATE_NAMES:
        available = ", ".join(sorted(_TEMPLATE_NAMES))
        raise SystemExit(
            f"Unknown template '{name}'. Available templates: {available}"
        )

    module = import_module(f"{__name__}.{key}")
    template_cls: type[BadgeTemplate] | None = getattr(module, "Template", None)
    if not template_cls or not issubclass(template_cls, BadgeTemplate):
        raise SystemExit(
            f"Template '{name}' does not export a valid Template class"
        )

    if key == "image":
        return template_cls(asset_path)  # type: ignore[call-arg]
    return template_cls()


def list_templates() -> Iterable[str]:
    """Return the template identifiers."""

    return sorted(_TEMPLATE_NAMES)


__all__ = ["BadgeTemplate", "TemplateAsset", "get_template", "list_templates"]
