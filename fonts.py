# pyright: reportUnknownVariableType=false, reportUnknownMemberType=false
# pyright: reportUnknownArgumentType=false, reportAttributeAccessIssue=false
# pyright: reportMissingImports=false
# pyright: reportMissingTypeStubs=false

"""Font registration and metrics for badge text."""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Union

from fontTools.ttLib import TTFont as VariableTTFont
from fontTools.varLib import instancer
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.pdfmetrics import getAscent, getDescent, stringWidth
from reportlab.pdfbase.ttfonts import TTFont as ReportLabTTFont

logger = logging.getLogger(__name__)

FONTS_DIR = Path(__file__).resolve().parent / "fonts"


@dataclass(frozen=True)
class BuiltinFont:
    """One of the standard PDF fonts reportlab knows without a file."""

    family_name: str
    regular: str
    bold: str


@dataclass(frozen=True)
class LocalVariableFont:
    family_name: str
    filename: str


@dataclass(frozen=True)
class LocalStaticFont:
    family_name: str
    files: dict[int, str]


FontSource = Union[BuiltinFont, LocalVariableFont, LocalStaticFont]

BOLD_WEIGHT = 600


def _font_key(name: str) -> str:
    return " ".join(name.strip().lower().split())


FONT_SOURCES: dict[str, FontSource] = {
    _font_key("Helvetica"): BuiltinFont(
        family_name="Helvetica",
        regular="Helvetica",
        bold="Helvetica-Bold",
    ),
    _font_key("Times"): BuiltinFont(
        family_name="Times",
        regular="Times-Roman",
        bold="Times-Bold",
    ),
    _font_key("Inter"): LocalVariableFont(
        family_name="Inter",
        filename="InterVariable.ttf",
    ),
    _font_key("Inter Static"): LocalStaticFont(
        family_name="Inter Static",
        files={400: "Inter-Regular.ttf", 700: "Inter-Bold.ttf"},
    ),
}


@dataclass(frozen=True)
class FontSettings:
    """Resolved font name registered with ReportLab."""

    font_name: str
    weight: float


class VariableFontManager:
    """Instantiate static font variants from a variable font file."""

    def __init__(self, family: str, font_path: Path) -> None:
        self.family = family
        self.font_path = font_path
        self._font_bytes = font_path.read_bytes()
        self._weight_min, self._weight_max = self._discover_weight_axis()
        self._registered: dict[str, str] = {}

    def _discover_weight_axis(self) -> tuple[float, float]:
        font = VariableTTFont(BytesIO(self._font_bytes))
        try:
            axis = next(ax for ax in font["fvar"].axes if ax.axisTag == "wght")
        except (KeyError, StopIteration) as exc:
            raise RuntimeError(
                f"Variable font '{self.font_path}' does not expose a wght axis."
            ) from exc
        return float(axis.minValue), float(axis.maxValue)

    def font_name_for_weight(self, weight: float) -> str:
        weight = float(weight)
        if not self._weight_min <= weight <= self._weight_max:
            raise ValueError(
                f"Font weight {weight} outside supported range "
                f"{self._weight_min:.0f}-{self._weight_max:.0f}"
            )
        key = f"{weight:.1f}"
        cached = self._registered.get(key)
        if cached:
            return cached

        font_name = f"{self.family}-w{int(round(weight))}"
        pdfmetrics.registerFont(ReportLabTTFont(font_name, self._instantiate(weight)))
        logger.info("registered %s from %s", font_name, self.font_path.name)
        self._registered[key] = font_name
        return font_name

    def _instantiate(self, weight: float) -> BytesIO:
        font = VariableTTFont(BytesIO(self._font_bytes))
        instancer.instantiateVariableFont(font, {"wght": weight}, inplace=True)
        self._rename(font, weight)
        buffer = BytesIO()
        font.save(buffer)
        buffer.seek(0)
        return buffer

    def _rename(self, font: VariableTTFont, weight: float) -> None:
        """Give each instance its own PostScript name so embeds don't clash."""
        nm = font["name"]
        target_ps = re.sub(
            r"[^A-Za-z0-9-]", "", f"{self.family}-W{int(round(weight))}"
        )[:63]
        current_ps = nm.getName(6, 3, 1, 0x409) or nm.getName(6, 1, 0, 0)
        if not current_ps or current_ps.toUnicode() == target_ps:
            return
        for plat, enc, lang in ((3, 1, 0x409), (1, 0, 0)):
            nm.setName(target_ps, 6, plat, enc, lang)
            nm.setName(f"{self.family} {int(round(weight))}", 4, plat, enc, lang)


class FontRegistry:
    """Resolve ``(family, weight)`` pairs to registered ReportLab font names.

    Registration is process-wide in ReportLab, so lookups are serialized.
    """

    def __init__(self, fonts_dir: Path = FONTS_DIR) -> None:
        self.fonts_dir = fonts_dir
        self._lock = threading.Lock()
        self._variable_managers: dict[str, VariableFontManager] = {}
        self._static_registry: dict[tuple[str, int], str] = {}

    def get_font_name(self, family: str, weight: float) -> str:
        info = FONT_SOURCES.get(_font_key(family))
        if info is None:
            available = ", ".join(sorted(FONT_SOURCES))
            raise SystemExit(
                f"Unknown font family '{family}'. Available: {available}")

        with self._lock:
            if isinstance(info, BuiltinFont):
                return info.bold if weight >= BOLD_WEIGHT else info.regular
            if isinstance(info, LocalVariableFont):
                return self._get_variable_font_name(info, weight)
            return self._get_static_font_name(info, weight)

    def _get_variable_font_name(
        self, info: LocalVariableFont, weight: float
    ) -> str:
        key = _font_key(info.family_name)
        manager = self._variable_managers.get(key)
        if manager is None:
            destination = self.fonts_dir / info.filename
            if not destination.exists():
                raise SystemExit(
                    f"Font file '{destination}' for family '{info.family_name}' is missing."
                )
            manager = VariableFontManager(info.family_name, destination)
            self._variable_managers[key] = manager
        return manager.font_name_for_weight(weight)

    def _get_static_font_name(self, info: LocalStaticFont, weight: float) -> str:
        weight_int = int(round(weight))
        filename = info.files.get(weight_int)
        if filename is None:
            # pick the closest available weight
            closest = min(sorted(info.files), key=lambda w: abs(w - weight_int))
            filename = info.files[closest]
            weight_int = closest

        key = (info.family_name, weight_int)
        cached = self._static_registry.get(key)
        if cached:
            return cached

        destination = self.fonts_dir / filename
        if not destination.exists():
            raise SystemExit(
                f"Font file '{destination}' for family '{info.family_name}' is missing."
            )

        font_name = f"{info.family_name.replace(' ', '')}-w{weight_int}"
        pdfmetrics.registerFont(ReportLabTTFont(font_name, destination))
        logger.info("registered %s from %s", font_name, filename)
        self._static_registry[key] = font_name
        return font_name


class ReportLabTextMeasurer:
    """Text metrics for a registered ReportLab font.

    Heights follow the em-box convention: ascent and descent are expressed
    per 1000 units, descent is negative.
    """

    def __init__(self, font_name: str) -> None:
        self.font_name = font_name
        self._ascent = float(getAscent(font_name))
        self._descent = float(getDescent(font_name))

    @property
    def _em_height(self) -> float:
        return self._ascent - self._descent

    def width_of_text(self, text: str, font_size: float) -> float:
        return stringWidth(text, self.font_name, font_size)

    def line_height(self, font_size: float) -> float:
        return font_size * 1000 / self._em_height

    def height_with_descender(self, font_size: float) -> float:
        return self._em_height * font_size / 1000

    def height_without_descender(self, font_size: float) -> float:
        return self._ascent * font_size / 1000


_REGISTRY = FontRegistry()


def build_badge_font(family: str, weight: float) -> FontSettings:
    """Register ``family`` at ``weight`` and return ready-to-use settings."""

    return FontSettings(
        font_name=_REGISTRY.get_font_name(family, weight),
        weight=weight,
    )


__all__ = [
    "FONT_SOURCES",
    "FontRegistry",
    "FontSettings",
    "ReportLabTextMeasurer",
    "build_badge_font",
]
