import tempfile
import unittest
from pathlib import Path

from reportlab.pdfbase.pdfmetrics import getAscent, getDescent, stringWidth

from badge_layout import fit_line
from fonts import FontRegistry, ReportLabTextMeasurer, build_badge_font


class FontRegistryTests(unittest.TestCase):
    def test_builtin_bold_and_regular(self) -> None:
        registry = FontRegistry()
        self.assertEqual(registry.get_font_name("Helvetica", 700), "Helvetica-Bold")
        self.assertEqual(registry.get_font_name("helvetica", 400), "Helvetica")
        self.assertEqual(registry.get_font_name("  TIMES ", 700), "Times-Bold")

    def test_unknown_family_exits(self) -> None:
        with self.assertRaises(SystemExit):
            FontRegistry().get_font_name("Comic Sans", 400)

    def test_missing_font_file_exits(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            registry = FontRegistry(fonts_dir=Path(tmp))
            with self.assertRaises(SystemExit):
                registry.get_font_name("Inter", 700)
            with self.assertRaises(SystemExit):
                registry.get_font_name("Inter Static", 700)

    def test_build_badge_font(self) -> None:
        font = build_badge_font("Helvetica", 700)
        self.assertEqual(font.font_name, "Helvetica-Bold")
        self.assertEqual(font.weight, 700)


class ReportLabTextMeasurerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.measurer = ReportLabTextMeasurer("Helvetica-Bold")
        self.ascent = getAscent("Helvetica-Bold")
        self.descent = getDescent("Helvetica-Bold")

    def test_width_matches_string_width(self) -> None:
        self.assertAlmostEqual(
            self.measurer.width_of_text("Ada Lovelace", 24),
            stringWidth("Ada Lovelace", "Helvetica-Bold", 24),
        )

    def test_descender_height_is_scaled_descent(self) -> None:
        size = 40
        descender = (
            self.measurer.height_with_descender(size)
            - self.measurer.height_without_descender(size)
        )
        self.assertAlmostEqual(descender, abs(self.descent) * size / 1000)

    def test_line_height(self) -> None:
        self.assertAlmostEqual(
            self.measurer.line_height(10),
            10 * 1000 / (self.ascent - self.descent),
        )

    def test_metrics_grow_with_size(self) -> None:
        self.assertLess(
            self.measurer.width_of_text("Badge", 10),
            self.measurer.width_of_text("Badge", 11),
        )
        self.assertLess(self.measurer.line_height(10), self.measurer.line_height(11))

    def test_fit_line_with_real_metrics(self) -> None:
        info = fit_line(self.measurer, "Grace Hopper")
        self.assertGreaterEqual(info.font_size, 1)
        self.assertLessEqual(info.font_size, 80)
        self.assertLessEqual(info.size.width, 500)
        self.assertLessEqual(info.size.height, 115.2)
        if info.font_size < 80:
            self.assertGreater(
                self.measurer.width_of_text("Grace Hopper", info.font_size + 1),
                500,
            )


if __name__ == "__main__":
    unittest.main()
