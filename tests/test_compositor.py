import shutil
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from iconforge.compositor import (
    IconSpec,
    apply_mask,
    background_canvas,
    make_icon,
    render_icon,
    resize_contain,
)
from iconforge.raster import load_image_any

from tests.helpers import make_png

RED = (255, 0, 0, 255)
DARK = (23, 23, 23, 255)


def _close(px, expected, tol=2):
    return all(abs(a - b) <= tol for a, b in zip(px, expected))


class CompositorTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)


class TestPrimitives(CompositorTestCase):

    def test_resize_contain_letterboxes(self):
        src = Image.new("RGBA", (200, 100), RED)
        out = resize_contain(src, 50)
        self.assertEqual(out.size, (50, 50))
        self.assertEqual(out.getpixel((25, 25)), RED)
        self.assertEqual(out.getpixel((25, 2))[3], 0)
        self.assertEqual(out.getpixel((25, 47))[3], 0)

    def test_resize_contain_upscales_to_box(self):
        out = resize_contain(Image.new("RGBA", (10, 20), RED), 100)
        bbox = out.getchannel("A").getbbox()
        self.assertEqual(bbox, (25, 0, 75, 100))

    def test_background_canvas_modes(self):
        self.assertEqual(background_canvas(8).getpixel((0, 0)), (0, 0, 0, 0))
        self.assertEqual(background_canvas(8, "#171717").getpixel((3, 3)), DARK)
        # A gradient without a base color falls back to transparent.
        self.assertEqual(background_canvas(8, None, True).getpixel((3, 3)), (0, 0, 0, 0))

    def test_apply_mask_is_destination_in(self):
        bg = Image.new("RGBA", (4, 4), DARK)
        mask = Image.new("L", (4, 4), 0)
        mask.putpixel((1, 1), 255)
        out = apply_mask(bg, mask)
        self.assertEqual(out.getpixel((1, 1)), DARK)
        self.assertEqual(out.getpixel((0, 0))[3], 0)

    def test_icon_spec_rejects_bad_options(self):
        with self.assertRaises(ValueError):
            IconSpec(self.tmp / "a.png", self.tmp / "b.png", padding=0.35)
        with self.assertRaises(ValueError):
            IconSpec(self.tmp / "a.png", self.tmp / "b.png", padding=0.1, outer_padding=-0.1)
        with self.assertRaises(ValueError):
            IconSpec(self.tmp / "a.png", self.tmp / "b.png", padding=0.1, shape="circle")


class TestRenderIcon(CompositorTestCase):

    def _spec(self, **kw):
        kw.setdefault("padding", 0.1)
        return IconSpec(self.tmp / "in.png", self.tmp / "out.png", **kw)

    def test_transparent_padded_icon(self):
        out = render_icon(self._spec(padding=0.25), Image.new("RGBA", (512, 512), RED))
        self.assertEqual(out.size, (1024, 1024))
        self.assertEqual(out.getpixel((10, 10))[3], 0)
        self.assertEqual(out.getpixel((255, 512))[3], 0)
        self.assertEqual(out.getpixel((256, 512)), RED)
        self.assertEqual(out.getpixel((767, 512)), RED)
        self.assertEqual(out.getpixel((768, 512))[3], 0)

    def test_solid_background_without_shape(self):
        out = render_icon(
            self._spec(background_color="#171717"),
            Image.new("RGBA", (820, 820), (0, 0, 0, 0)),
        )
        self.assertEqual(out.getpixel((0, 0)), DARK)
        self.assertEqual(out.getpixel((1023, 1023)), DARK)

    def test_macos_squircle_tile(self):
        spec = self._spec(
            background_color="#171717",
            shape="squircle",
            outer_padding=0.12,
        )
        out = render_icon(spec, Image.new("RGBA", (624, 624), RED))
        self.assertEqual(out.size, (1024, 1024))
        # Transparent outer margin of 122 px.
        self.assertEqual(out.getpixel((60, 512))[3], 0)
        self.assertEqual(out.getpixel((121, 512))[3], 0)
        self.assertEqual(out.getpixel((512, 121))[3], 0)
        self.assertEqual(out.getpixel((902, 512))[3], 0)
        # Corners of the tile are clipped by the squircle.
        self.assertEqual(out.getpixel((124, 124))[3], 0)
        self.assertEqual(out.getpixel((899, 899))[3], 0)
        # Background between tile edge and icon.
        self.assertEqual(out.getpixel((512, 142)), DARK)
        self.assertEqual(out.getpixel((142, 512)), DARK)
        # Icon starts at 122 + 78.
        self.assertEqual(out.getpixel((199, 512)), DARK)
        self.assertEqual(out.getpixel((200, 512)), RED)
        self.assertEqual(out.getpixel((512, 512)), RED)

    def test_macos_rounded_rectangle_tile(self):
        spec = self._spec(background_color="#FFFFFF", shape="rounded-rectangle", outer_padding=0.12)
        out = render_icon(spec, Image.new("RGBA", (624, 624), (0, 0, 0, 0)))
        self.assertEqual(out.getpixel((123, 123))[3], 0)
        self.assertEqual(out.getpixel((512, 125)), (255, 255, 255, 255))
        self.assertEqual(out.getpixel((125, 512)), (255, 255, 255, 255))

    def test_gradient_background_is_opaque(self):
        out = render_icon(
            self._spec(background_color="#171717", use_gradient=True),
            Image.new("RGBA", (820, 820), (0, 0, 0, 0)),
        )
        self.assertEqual(out.getchannel("A").getextrema(), (255, 255))
        self.assertNotEqual(out.getpixel((0, 100)), out.getpixel((1023, 1023)))

    def test_small_source_is_scaled_up(self):
        out = render_icon(self._spec(padding=0.25), Image.new("RGBA", (64, 64), RED))
        self.assertTrue(_close(out.getpixel((512, 512)), RED))
        self.assertEqual(out.getchannel("A").getbbox(), (256, 256, 768, 768))


class TestMakeIcon(CompositorTestCase):

    def test_writes_png(self):
        src = make_png(self.tmp / "icon.png", (300, 200))
        spec = IconSpec(src, self.tmp / "out" / "icon-windows.png", padding=0.05)
        lines = []
        out = make_icon(spec, logfn=lines.append)
        self.assertTrue(out.is_file())
        with Image.open(out) as im:
            self.assertEqual(im.format, "PNG")
            self.assertEqual(im.size, (1024, 1024))
        self.assertTrue(lines and lines[0].startswith("OK: icon-windows.png"))

    def test_idempotent_output(self):
        src = make_png(self.tmp / "icon.png", (256, 256), (10, 120, 200, 255))
        kw = dict(padding=0.1, background_color="#808080", shape="squircle", outer_padding=0.12)
        a = make_icon(IconSpec(src, self.tmp / "a.png", **kw))
        b = make_icon(IconSpec(src, self.tmp / "b.png", **kw))
        first = a.read_bytes()
        self.assertEqual(first, b.read_bytes())
        make_icon(IconSpec(src, self.tmp / "a.png", **kw))
        self.assertEqual(first, a.read_bytes())

    def test_svg_input(self):
        svg = self.tmp / "icon.svg"
        svg.write_text(
            '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="12">'
            '<rect width="24" height="12" fill="#ff0000"/></svg>',
            encoding="utf-8",
        )
        im = load_image_any(svg, min_side=1024)
        self.assertEqual(im.mode, "RGBA")
        self.assertGreaterEqual(max(im.size), 1000)
        out = make_icon(IconSpec(svg, self.tmp / "svg.png", padding=0.1))
        with Image.open(out) as rendered:
            self.assertEqual(rendered.size, (1024, 1024))


if __name__ == "__main__":
    unittest.main()
