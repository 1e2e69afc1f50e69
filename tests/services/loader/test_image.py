"""이미지 디코딩 / 인코딩 테스트"""

import base64
from io import BytesIO
from unittest.mock import patch

import numpy as np
import pytest
from PIL import Image

from src.constants import Limits
from src.services.loader import LoadError, decode_image, load_image, resize_image, to_data_url
from src.services.loader.image import decode_base64_source, encode_jpeg, encode_png
from tests.helpers import b64_png, blank, png_bytes, with_rect


class TestDecodeImage:
    def test_png_to_rgba(self) -> None:
        image = with_rect(blank(40, 30), 5, 5, 10, 10)

        decoded = decode_image(png_bytes(image))

        assert decoded.shape == (30, 40, 4)
        assert decoded.dtype == np.uint8
        assert np.array_equal(decoded, image)

    def test_grayscale_converted_to_rgba(self) -> None:
        buffer = BytesIO()
        Image.new("L", (8, 6), 100).save(buffer, format="PNG")

        decoded = decode_image(buffer.getvalue())

        assert decoded.shape == (6, 8, 4)
        assert tuple(decoded[0, 0]) == (100, 100, 100, 255)

    def test_exif_orientation_applied(self) -> None:
        img = Image.new("RGB", (20, 10), (255, 255, 255))
        exif = img.getexif()
        exif[0x0112] = 6  # 90도 회전
        buffer = BytesIO()
        img.save(buffer, format="JPEG", exif=exif.tobytes())

        decoded = decode_image(buffer.getvalue())

        assert decoded.shape[:2] == (20, 10)

    def test_empty_bytes(self) -> None:
        with pytest.raises(LoadError, match="빈 데이터"):
            decode_image(b"")

    def test_corrupt_bytes(self) -> None:
        with pytest.raises(LoadError, match="디코딩 실패") as exc_info:
            decode_image(b"not an image", "cabinet.png")
        assert exc_info.value.source == "cabinet.png"

    def test_too_many_pixels(self) -> None:
        with patch.object(Limits, "MAX_PIXELS", 100):
            with pytest.raises(LoadError, match="픽셀수 초과"):
                decode_image(png_bytes(blank(20, 20)))


class TestBase64Source:
    def test_raw_base64(self) -> None:
        image = blank(10, 10)
        assert decode_base64_source(b64_png(image)) == png_bytes(image)

    def test_data_url(self) -> None:
        data_url = f"data:image/png;base64,{b64_png(blank(10, 10))}"
        assert decode_base64_source(data_url) == png_bytes(blank(10, 10))

    def test_line_wrapped_base64(self) -> None:
        encoded = b64_png(blank(10, 10))
        wrapped = "\n".join(encoded[i : i + 76] for i in range(0, len(encoded), 76))

        assert decode_base64_source(wrapped) == png_bytes(blank(10, 10))
        assert decode_base64_source(f"data:image/png;base64,{wrapped}\r\n") == png_bytes(
            blank(10, 10)
        )

    def test_invalid_base64(self) -> None:
        with pytest.raises(LoadError, match="base64"):
            decode_base64_source("@@@ not base64 @@@")

    def test_non_base64_data_url(self) -> None:
        with pytest.raises(LoadError, match="data URL"):
            decode_base64_source("data:image/svg+xml,<svg/>")


class TestLoadImage:
    def test_bytes(self) -> None:
        loaded = load_image(png_bytes(blank(12, 7)))
        assert loaded.shape == (7, 12, 4)

    def test_data_url(self) -> None:
        loaded = load_image(f"data:image/png;base64,{b64_png(blank(12, 7))}")
        assert loaded.shape == (7, 12, 4)

    def test_raw_base64(self) -> None:
        loaded = load_image(b64_png(blank(12, 7)))
        assert loaded.shape == (7, 12, 4)

    def test_url_uses_fetcher(self, fake_fetcher) -> None:
        fake_fetcher.images["https://cdn.test/empty.png"] = png_bytes(blank(12, 7))

        loaded = load_image("https://cdn.test/empty.png")

        assert loaded.shape == (7, 12, 4)
        assert fake_fetcher.calls == ["https://cdn.test/empty.png"]

    def test_url_fetch_failure(self, fake_fetcher) -> None:
        with pytest.raises(LoadError) as exc_info:
            load_image("https://cdn.test/missing.png")
        assert exc_info.value.source == "https://cdn.test/missing.png"

    def test_not_cached(self, fake_fetcher) -> None:
        fake_fetcher.images["https://cdn.test/a.png"] = png_bytes(blank(4, 4))

        load_image("https://cdn.test/a.png")
        load_image("https://cdn.test/a.png")

        assert len(fake_fetcher.calls) == 2


class TestResizeImage:
    def test_new_size(self) -> None:
        resized = resize_image(blank(100, 50), 200, 80)
        assert resized.shape == (80, 200, 4)

    def test_uniform_color_preserved(self) -> None:
        resized = resize_image(blank(100, 50, (10, 20, 30, 255)), 37, 91)
        assert np.all(resized == np.array([10, 20, 30, 255], dtype=np.uint8))

    def test_source_unchanged(self) -> None:
        image = blank(10, 10)
        resize_image(image, 20, 20)
        assert image.shape == (10, 10, 4)

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
    def test_invalid_size(self, size: tuple[int, int]) -> None:
        with pytest.raises(ValueError):
            resize_image(blank(10, 10), *size)


class TestEncoding:
    def test_png_roundtrip_exact(self) -> None:
        image = with_rect(blank(16, 16), 2, 2, 4, 4, (1, 2, 3, 128))
        assert np.array_equal(decode_image(encode_png(image)), image)

    def test_jpeg_drops_alpha(self) -> None:
        data = encode_jpeg(blank(16, 16), quality=80)
        with Image.open(BytesIO(data)) as img:
            assert img.format == "JPEG"
            assert img.mode == "RGB"

    def test_jpeg_accepts_pil_image(self) -> None:
        data = encode_jpeg(Image.new("RGB", (8, 8)))
        assert data[:2] == b"\xff\xd8"

    def test_data_url(self) -> None:
        assert to_data_url(b"abc") == f"data:image/png;base64,{base64.b64encode(b'abc').decode()}"
        assert to_data_url(b"abc", "image/jpeg").startswith("data:image/jpeg;base64,")
