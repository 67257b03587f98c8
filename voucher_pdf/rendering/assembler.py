# voucher_pdf/rendering/assembler.py
from __future__ import annotations

import io
from typing import Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from voucher_pdf.errors import AssemblerError, EmptyDocumentError
from voucher_pdf.layout.planner import PageGeometry
from voucher_pdf.rendering.rasterizer import RasterImage


class DocumentAssembler:
    """
    Places rasterized vouchers on reportlab pages.

    - the first page exists from the start
    - add_page() only advances when the current page holds something, so an
      empty page is never emitted
    - coordinates are the planner's (top-left origin); reportlab's origin is
      bottom-left, so y is flipped here and nothing else is changed
    """

    def __init__(self, geometry: PageGeometry, *, title: str | None = None):
        self.geometry = geometry
        self._buf = io.BytesIO()
        self._c = canvas.Canvas(self._buf, pagesize=(geometry.page_w, geometry.page_h))
        if title:
            self._c.setTitle(title)

        self._closed_pages = 0
        self._images_on_page = 0
        self._images_total = 0
        self._final: Optional[bytes] = None

    @property
    def page_count(self) -> int:
        return self._closed_pages + (1 if self._images_on_page else 0)

    @property
    def page_index(self) -> int:
        """0-based index of the page the next embed lands on."""
        return self._closed_pages

    @property
    def image_count(self) -> int:
        return self._images_total

    @property
    def is_finalized(self) -> bool:
        return self._final is not None

    def _check_open(self) -> None:
        if self._final is not None:
            raise AssemblerError("document already finalized")

    def add_page(self) -> None:
        self._check_open()
        if not self._images_on_page:
            return
        self._c.showPage()
        self._closed_pages += 1
        self._images_on_page = 0

    def embed(self, image: RasterImage, x: float, y: float, width: float, height: float) -> None:
        self._check_open()
        y_pdf = self.geometry.page_h - y - height
        self._c.drawImage(
            ImageReader(io.BytesIO(image.data)),
            x,
            y_pdf,
            width=width,
            height=height,
        )
        self._images_on_page += 1
        self._images_total += 1

    def finalize(self) -> bytes:
        if self._final is None:
            if not self._images_total:
                raise EmptyDocumentError("no voucher was embedded; refusing to emit an empty document")
            self._c.save()
            self._final = self._buf.getvalue()
        return self._final
