"""
Image Backend Tests

Pillow renderer and deterministic stub.
"""

import io

import pytest
from PIL import Image, ImageDraw

from services.imaging import (
    PNG_SIGNATURE,
    ImageGenerationError,
    PillowImageBackend,
    StubImageBackend,
)


class TestStubImageBackend:
    """Test stub renderer."""

    def test_deterministic(self):
        """Same text, same bytes."""
        backend = StubImageBackend()
        assert backend.generate("hello") == backend.generate("hello")

    def test_distinct_texts_distinct_bytes(self):
        backend = StubImageBackend()
        assert backend.generate("hello") != backend.generate("world")

    def test_png_signature(self):
        assert StubImageBackend().generate("hello").startswith(PNG_SIGNATURE)

    def test_empty_text_rejected(self):
        with pytest.raises(ImageGenerationError):
            StubImageBackend().generate("")


class TestPillowImageBackend:
    """Test Pillow renderer."""

    def _open(self, data: bytes) -> Image.Image:
        return Image.open(io.BytesIO(data))

    def test_renders_png(self):
        """Output is a decodable PNG of the configured width."""
        data = PillowImageBackend(width=600).generate("hello")

        assert data.startswith(PNG_SIGNATURE)
        image = self._open(data)
        assert image.format == "PNG"
        assert image.size[0] == 600

    def test_long_text_grows_height(self):
        """Wrapped text makes a taller card, never a wider one."""
        backend = PillowImageBackend(width=400, font_size=20)

        short = self._open(backend.generate("hi"))
        long = self._open(backend.generate("a fairly long sentence " * 20))

        assert long.size[0] == short.size[0] == 400
        assert long.size[1] > short.size[1]

    def test_explicit_newlines_add_lines(self):
        backend = PillowImageBackend(width=400, font_size=20)

        one = self._open(backend.generate("line"))
        three = self._open(backend.generate("line\nline\nline"))

        assert three.size[1] > one.size[1]

    def test_unbreakable_word_wraps(self):
        """A single word wider than the card is split, not overflowed."""
        backend = PillowImageBackend(width=200, font_size=20, padding=20)
        lines = backend._wrap(
            ImageDraw.Draw(Image.new("RGB", (1, 1))),
            "x" * 200,
            160,
        )

        assert len(lines) > 1
        assert "".join(lines) == "x" * 200

    def test_text_pixels_drawn(self):
        """Something other than the background is drawn."""
        backend = PillowImageBackend(width=300, background=(0, 0, 0), foreground=(255, 255, 255))
        image = self._open(backend.generate("hello")).convert("RGB")

        colors = {color for _, color in image.getcolors(maxcolors=1 << 16)}
        assert colors - {(0, 0, 0)}

    def test_empty_text_rejected(self):
        with pytest.raises(ImageGenerationError):
            PillowImageBackend().generate("")

    @pytest.mark.parametrize("text", ["   ", "\n\n", "\t"])
    def test_whitespace_renders_blank_card(self, text):
        """Whitespace is content: a card with nothing on it."""
        image = self._open(PillowImageBackend(width=300, background=(0, 0, 0)).generate(text))

        assert image.format == "PNG"
        assert image.size[0] == 300
        assert {color for _, color in image.convert("RGB").getcolors()} == {(0, 0, 0)}

    def test_missing_font_file(self, tmp_path):
        with pytest.raises(ImageGenerationError):
            PillowImageBackend(font_path=str(tmp_path / "missing.ttf"))

    def test_width_must_exceed_padding(self):
        with pytest.raises(ValueError):
            PillowImageBackend(width=50, padding=30)
