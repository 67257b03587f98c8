from __future__ import annotations

import io
from datetime import datetime
from decimal import Decimal
from typing import List

import pytest
from PIL import Image

from voucher_pdf.config import VoucherSettings
from voucher_pdf.rendering.rasterizer import RasterImage
from voucher_pdf.vouchers.record import VoucherRecord


def make_record(i: int = 1, **overrides) -> VoucherRecord:
    fields = dict(
        code=f"CP{i:012d}",
        customer_name=f"Cliente {i}",
        customer_tax_id="123.456.789-00",
        store_name="Loja Bela Moda",
        mall_name="Shopping Center Norte",
        attribution_date=datetime(2026, 10, 18, 14, 30),
        purchase_value=Decimal("150.00"),
    )
    fields.update(overrides)
    return VoucherRecord(**fields)


def make_records(n: int) -> List[VoucherRecord]:
    return [make_record(i) for i in range(1, n + 1)]


def png_bytes(w: int = 6, h: int = 4, color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (w, h), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeRasterizer:
    """
    Stands in for rasterize(): returns a tiny PNG per voucher and remembers
    which voucher code produced which image. Codes in `fail_codes` raise.
    """

    def __init__(self, fail_codes=()):
        self.fail_codes = set(fail_codes)
        self.calls: List[str] = []
        self.images = []  # (image, code)

    def __call__(self, composition, surface, **kwargs) -> RasterImage:
        code = composition.fields["code"]
        self.calls.append(code)
        if code in self.fail_codes:
            raise RuntimeError(f"simulated failure for {code}")
        img = RasterImage(data=png_bytes(), width_px=6, height_px=4)
        self.images.append((img, code))
        return img

    def code_for(self, image: RasterImage) -> str:
        for img, code in self.images:
            if img is image:
                return code
        raise KeyError("unknown image")


@pytest.fixture
def settings() -> VoucherSettings:
    return VoucherSettings(layout="grid", raster_scale=1)


@pytest.fixture
def fake_rasterizer() -> FakeRasterizer:
    return FakeRasterizer()
