import os
import tempfile
import unittest

from config import CFG
from io_files import write_image, write_image_view_html, write_placement
from models import IDENTITY, Orientation, Variant


class WriteOutputsTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self._orig_placement = CFG.PLACEMENT_OUT
        self._orig_image = CFG.IMAGE_OUT
        self._orig_html = CFG.IMAGE_HTML

    def tearDown(self) -> None:
        CFG.PLACEMENT_OUT = self._orig_placement
        CFG.IMAGE_OUT = self._orig_image
        CFG.IMAGE_HTML = self._orig_html

    def test_write_placement_uses_configured_relative_path(self) -> None:
        CFG.PLACEMENT_OUT = "outputs/custom_placement.txt"
        rows = tuple("." * 10 for _ in range(10))
        placement = [
            Variant(11, rows, IDENTITY),
            Variant(12, rows, Orientation(1, False)),
            Variant(13, rows, Orientation(0, True)),
            Variant(14, rows, Orientation(3, True)),
        ]

        path = write_placement(placement, 2, self.tmpdir.name)

        expected = os.path.join(self.tmpdir.name, "outputs", "custom_placement.txt")
        self.assertEqual(path, expected)
        with open(path, "r", encoding="utf-8") as fh:
            lines = fh.read().splitlines()
        self.assertEqual(len(lines), 4)
        self.assertEqual(lines[0], f"11 {IDENTITY.label} @ (0,0)")
        self.assertTrue(lines[3].startswith("14 "))
        self.assertTrue(lines[3].endswith("@ (1,1)"))

    def test_write_placement_without_solution(self) -> None:
        CFG.PLACEMENT_OUT = "placement.txt"
        path = write_placement([], 3, self.tmpdir.name)
        with open(path, "r", encoding="utf-8") as fh:
            self.assertEqual(fh.read(), "No solution\n")

    def test_write_image_one_row_per_line(self) -> None:
        CFG.IMAGE_OUT = "image.txt"
        path = write_image(("#..", ".#.", "..#"), self.tmpdir.name)
        with open(path, "r", encoding="utf-8") as fh:
            self.assertEqual(fh.read(), "#..\n.#.\n..#\n")

    def test_write_image_view_html_accepts_absolute_path(self) -> None:
        target = os.path.join(self.tmpdir.name, "html", "image.html")
        CFG.IMAGE_HTML = target

        svg = "<svg></svg>"
        legend = "<li>motif</li>"

        path = write_image_view_html(svg, legend, self.tmpdir.name, title="3 x 3")

        self.assertEqual(path, target)
        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
        self.assertIn(svg, contents)
        self.assertIn(legend, contents)
        self.assertIn("<title>3 x 3</title>", contents)


if __name__ == "__main__":
    unittest.main()
