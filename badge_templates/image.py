"""Badge template drawn over a PNG artwork file."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .base import BadgeTemplate, TemplateAsset

ASSETS_DIR = Path(__file__).resolve().parent.parent / "assets"
DEFAULT_ASSET = ASSETS_DIR / "badge.png"


class Template(BadgeTemplate):
    """Surface size follows the artwork's pixel size, one point per pixel."""

    name = "image"

    def __init__(self, asset_path: Path | None = None) -> None:
        self.asset = TemplateAsset(asset_path or DEFAULT_ASSET)
        self._size: tuple[float, float] | None = None

    @property
    def surface_size(self) -> tuple[float, float]:
        if self._size is None:
            with Image.open(BytesIO(self.asset.load())) as img:
                width, height = img.size
            self._size = (float(width), float(height))
        return self._size

    def draw_background(self, canvas_obj: canvas.Canvas) -> None:
        width, height = self.surface_size
        canvas_obj.drawImage(
            ImageReader(BytesIO(self.asset.load())),
            0,
            0,
            width=width,
            height=height,
            mask="auto",
        )
