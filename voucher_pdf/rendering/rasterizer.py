# voucher_pdf/rendering/rasterizer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import fitz  # PyMuPDF

from voucher_pdf.errors import RasterizationError, SurfaceError
from voucher_pdf.vouchers.template import VoucherComposition

logger = logging.getLogger(__name__)

# insert_htmlbox may shrink a voucher down to this factor before giving up
MIN_FIT_SCALE = 0.5


@dataclass(frozen=True)
class RasterImage:
    data: bytes
    width_px: int
    height_px: int
    image_format: str = "png"


class OffscreenSurface:
    """
    One in-memory PyMuPDF document with a single page of fixed logical size.
    Nothing is shown or written to disk. Every draw() replaces the page, so a
    batch reuses the same surface for all of its vouchers.

      with OffscreenSurface(600, 400) as surface:
          page = surface.draw(composition)
    """

    def __init__(self, width: float, height: float):
        self.width = float(width)
        self.height = float(height)
        self._doc: fitz.Document | None = None

    def open(self) -> "OffscreenSurface":
        if self._doc is not None:
            raise SurfaceError("off-screen surface is already open")
        if self.width <= 0 or self.height <= 0:
            raise SurfaceError(f"invalid surface size {self.width}x{self.height}")
        try:
            self._doc = fitz.open()
        except Exception as e:
            raise SurfaceError(f"could not allocate off-screen surface: {e}") from e
        return self

    def close(self) -> None:
        if self._doc is not None:
            self._doc.close()
            self._doc = None

    @property
    def is_open(self) -> bool:
        return self._doc is not None

    def __enter__(self) -> "OffscreenSurface":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def draw(self, composition: VoucherComposition) -> fitz.Page:
        if self._doc is None:
            raise SurfaceError("off-screen surface is not open")

        # previous voucher is discarded, never composited underneath
        while self._doc.page_count:
            self._doc.delete_page(0)
        page = self._doc.new_page(width=self.width, height=self.height)

        spare_height, _scale = page.insert_htmlbox(
            page.rect,
            composition.html,
            css=composition.css,
            scale_low=MIN_FIT_SCALE,
        )
        if spare_height < 0:
            raise RasterizationError("voucher content does not fit the canvas")
        return page


def rasterize(
    composition: VoucherComposition,
    surface: OffscreenSurface,
    *,
    scale: int = 2,
    image_format: str = "png",
    jpeg_quality: int = 85,
) -> RasterImage:
    """
    Lay the composition out on the shared surface and sample it at an integer
    zoom. A 600x400 canvas at scale=2 yields a 1200x800 image.
    """
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 1:
        raise ValueError(f"scale must be an integer >= 1, got {scale!r}")
    if image_format not in ("png", "jpeg"):
        raise ValueError(f"unsupported image format {image_format!r}")

    page = surface.draw(composition)
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)

    if image_format == "jpeg":
        data = pix.tobytes("jpeg", jpg_quality=jpeg_quality)
    else:
        data = pix.tobytes("png")

    return RasterImage(data=data, width_px=pix.width, height_px=pix.height, image_format=image_format)


def rasterize_or_skip(
    composition: VoucherComposition,
    surface: OffscreenSurface,
    code: str,
    *,
    rasterizer=rasterize,
    **kwargs,
) -> Optional[RasterImage]:
    """
    Per-voucher recovery boundary: a failure is logged with the voucher code
    and reported as None so the batch can carry on. A closed surface is not a
    per-voucher fault and still propagates.
    """
    try:
        return rasterizer(composition, surface, **kwargs)
    except SurfaceError:
        raise
    except Exception:
        logger.warning("Skipping voucher %s: rasterization failed", code, exc_info=True)
        return None
