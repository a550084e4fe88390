"""Abstract base class for badge templates."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

# final printed page, after scaling the surface down
OUTPUT_SIZE = (300.0, 400.0)
OUTPUT_SCALE = 0.5


class TemplateAsset:
    """Background asset read from disk on first use and kept for reuse."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: bytes | None = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._data is not None

    def load(self) -> bytes:
        if self._data is not None:
            return self._data
        with self._lock:
            if self._data is None:
                try:
                    self._data = self.path.read_bytes()
                except OSError as exc:
                    raise RuntimeError(
                        f"error loading resource {self.path.name}"
                    ) from exc
                logger.info("loaded %s", self.path.name)
        return self._data


class BadgeTemplate(ABC):
    """Page geometry and background shared by every badge of one design."""

    name: str = ""

    @property
    @abstractmethod
    def surface_size(self) -> tuple[float, float]:
        """Return the drawing surface size in points, before scaling."""

    @property
    def output_size(self) -> tuple[float, float]:
        return OUTPUT_SIZE

    @property
    def scale(self) -> float:
        return OUTPUT_SCALE

    @property
    def raster_dpi(self) -> int:
        """Return DPI for rasterized outputs (PNG), defaults to 144."""

        return 144

    @abstractmethod
    def draw_background(self, canvas_obj: canvas.Canvas) -> None:
        """Paint the template artwork onto the unscaled surface."""
