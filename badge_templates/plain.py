"""Badge template with a flat background and no artwork file."""

from __future__ import annotations

from reportlab.lib.colors import HexColor
from reportlab.pdfgen import canvas

from .base import BadgeTemplate

SURFACE_W = 600.0
SURFACE_H = 800.0
BACKGROUND = HexColor("#1f2a44")


class Template(BadgeTemplate):
    name = "plain"

    @property
    def surface_size(self) -> tuple[float, float]:
        return SURFACE_W, SURFACE_H

    def draw_background(self, canvas_obj: canvas.Canvas) -> None:
        canvas_obj.saveState()
        canvas_obj.setFillColor(BACKGROUND)
        canvas_obj.rect(0, 0, SURFACE_W, SURFACE_H, stroke=0, fill=1)
        canvas_obj.restoreState()
