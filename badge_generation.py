"""Rendering helpers for badge output."""

from __future__ import annotations

import logging
from io import BytesIO

import fitz
from reportlab.lib.colors import white
from reportlab.pdfgen import canvas

from badge_layout import fits, layout_badge
from badge_templates.base import BadgeTemplate
from badge_types import BadgeLayout, BadgeRequest
from fonts import FontSettings, ReportLabTextMeasurer

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = {"pdf": "application/pdf", "png": "image/png"}


def generate_badge(
    request: BadgeRequest,
    template: BadgeTemplate,
    font: FontSettings,
    *,
    output: str = "pdf",
    highres: bool = False,
    debug: bool = False,
) -> bytes:
    """Render ``request`` onto ``template`` and return PDF or PNG bytes."""

    output = output.lower()
    if output not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unsupported output format '{output}'. "
            f"Expected one of: {', '.join(sorted(OUTPUT_FORMATS))}"
        )

    pdf_bytes = render_pdf(request, template, font, debug=debug)
    if output == "pdf":
        return pdf_bytes
    dpi = template.raster_dpi * (2 if highres else 1)
    return rasterize(pdf_bytes, dpi)


def render_pdf(
    request: BadgeRequest,
    template: BadgeTemplate,
    font: FontSettings,
    *,
    debug: bool = False,
) -> bytes:
    buffer = BytesIO()
    canvas_obj = canvas.Canvas(buffer, pagesize=template.output_size)
    canvas_obj.scale(template.scale, template.scale)
    template.draw_background(canvas_obj)

    surface_width, _ = template.surface_size
    layout = layout_badge(
        ReportLabTextMeasurer(font.font_name),
        request.name,
        request.company,
        surface_width,
    )
    for info in layout.fitted:
        if not fits(info):
            logger.warning("text does not fit the badge: %r", info.text)

    _draw_lines(canvas_obj, layout, font)
    if debug:
        _draw_bounds(canvas_obj, layout)

    canvas_obj.showPage()
    canvas_obj.save()
    return buffer.getvalue()


def rasterize(pdf_bytes: bytes, dpi: int) -> bytes:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        page = doc.load_page(0)
        pix = page.get_pixmap(dpi=dpi)
        return pix.tobytes("png")


def _draw_lines(
    canvas_obj: canvas.Canvas,
    layout: BadgeLayout,
    font: FontSettings,
) -> None:
    canvas_obj.saveState()
    canvas_obj.setFillColor(white)
    for line in layout.lines:
        canvas_obj.setFont(font.font_name, line.font_size)
        canvas_obj.drawString(line.x, line.y, line.text)
    canvas_obj.restoreState()


def _draw_bounds(canvas_obj: canvas.Canvas, layout: BadgeLayout) -> None:
    bounds = layout.bounds
    canvas_obj.saveState()
    canvas_obj.setStrokeColor(white)
    canvas_obj.setLineWidth(1)
    canvas_obj.rect(bounds.x, bounds.y, bounds.width, bounds.height, stroke=1, fill=0)
    canvas_obj.restoreState()
