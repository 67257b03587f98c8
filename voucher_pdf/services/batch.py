# voucher_pdf/services/batch.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional, Sequence

from voucher_pdf.config import SKIP_POLICIES, VoucherSettings, get_settings
from voucher_pdf.errors import EmptyBatchError
from voucher_pdf.layout.pagination import Placement, iter_placements, page_count_for, paginate
from voucher_pdf.layout.planner import CANVAS_H, CANVAS_W, layout_geometry
from voucher_pdf.rendering.assembler import DocumentAssembler
from voucher_pdf.rendering.rasterizer import OffscreenSurface, RasterImage, rasterize, rasterize_or_skip
from voucher_pdf.services.keys import document_filename, utc_day
from voucher_pdf.vouchers.record import VoucherRecord
from voucher_pdf.vouchers.template import render

logger = logging.getLogger(__name__)

Rasterizer = Callable[..., RasterImage]


class BatchState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    RENDERING = "RENDERING"
    FINALIZING = "FINALIZING"
    DONE = "DONE"
    ABORTED = "ABORTED"


@dataclass(frozen=True)
class VoucherDocument:
    filename: str
    data: bytes
    page_count: int
    voucher_count: int


class VoucherBatch:
    """
    Drives one bulk voucher job:

      IDLE -> VALIDATING -> RENDERING -> FINALIZING -> DONE
                  |
                  +-> ABORTED   (empty input; nothing allocated)

    A voucher that fails to rasterize is logged and left out; it never aborts
    the batch. Anything else (surface, layout bookkeeping, finalize) propagates.
    One instance runs once.
    """

    def __init__(
        self,
        settings: VoucherSettings | None = None,
        *,
        rasterizer: Rasterizer = rasterize,
        day: str | None = None,
        part: int = 1,
        total_parts: int = 1,
    ):
        self.settings = settings or get_settings()
        if self.settings.skip_policy not in SKIP_POLICIES:
            raise ValueError(f"unknown skip policy {self.settings.skip_policy!r}")
        scale = self.settings.raster_scale
        if isinstance(scale, bool) or not isinstance(scale, int) or scale < 1:
            raise ValueError(f"raster_scale must be an integer >= 1, got {scale!r}")

        self.geometry = layout_geometry(self.settings.layout)
        self.state = BatchState.IDLE
        self.skipped = 0

        self._rasterizer = rasterizer
        self._day = day or utc_day()
        self._part = part
        self._total_parts = total_parts

    def _enter(self, state: BatchState) -> None:
        logger.debug("Voucher batch %s -> %s", self.state.value, state.value)
        self.state = state

    # -------------------------
    # Rendering
    # -------------------------

    def _image_for(self, record: VoucherRecord, surface: OffscreenSurface) -> Optional[RasterImage]:
        composition = render(record)
        image = rasterize_or_skip(
            composition,
            surface,
            record.code,
            rasterizer=self._rasterizer,
            scale=self.settings.raster_scale,
            image_format=self.settings.image_format,
            jpeg_quality=self.settings.jpeg_quality,
        )
        if image is None:
            self.skipped += 1
        return image

    def _placements(
        self,
        records: Sequence[VoucherRecord],
        surface: OffscreenSurface,
    ) -> Iterator[Placement[Optional[RasterImage]]]:
        if self.settings.skip_policy == "blank":
            # positions follow the input; a failed voucher leaves its slot empty
            for p in paginate(records, self.geometry):
                yield Placement(p.page_index, p.slot_index, self._image_for(p.item, surface))
            return

        # compact: failures drop out before slots are handed out
        images = (img for img in (self._image_for(r, surface) for r in records) if img is not None)
        yield from iter_placements(images, self.geometry.items_per_page)

    def run(self, records: Sequence[VoucherRecord]) -> VoucherDocument:
        if self.state is not BatchState.IDLE:
            raise RuntimeError("VoucherBatch.run() can only be called once")

        self._enter(BatchState.VALIDATING)
        if not records:
            self._enter(BatchState.ABORTED)
            raise EmptyBatchError("Nenhum cupom para gerar PDF")

        self._enter(BatchState.RENDERING)
        geometry = self.geometry
        logger.info(
            "Rendering %d vouchers on up to %d pages (layout=%s, %d per page, scale=%d)",
            len(records),
            page_count_for(len(records), geometry),
            self.settings.layout,
            geometry.items_per_page,
            self.settings.raster_scale,
        )

        filename = document_filename(self.settings.filename_prefix, self._day, self._part, self._total_parts)
        assembler = DocumentAssembler(geometry, title=filename)

        with OffscreenSurface(CANVAS_W, CANVAS_H) as surface:
            for placement in self._placements(records, surface):
                if placement.slot_index == 0 and placement.page_index > 0:
                    assembler.add_page()
                if placement.item is None:
                    continue
                x, y = geometry.slot_origin(placement.slot_index)
                assembler.embed(placement.item, x, y, geometry.item_w, geometry.item_h)

        self._enter(BatchState.FINALIZING)
        data = assembler.finalize()

        self._enter(BatchState.DONE)
        if self.skipped:
            logger.warning("%d of %d vouchers were skipped", self.skipped, len(records))
        logger.info("Voucher PDF ready: %s (%d pages, %d vouchers)", filename, assembler.page_count, assembler.image_count)

        return VoucherDocument(
            filename=filename,
            data=data,
            page_count=assembler.page_count,
            voucher_count=assembler.image_count,
        )


# -------------------------
# Entry points
# -------------------------

def generate_vouchers_pdf(
    records: Sequence[VoucherRecord],
    settings: VoucherSettings | None = None,
    *,
    rasterizer: Rasterizer = rasterize,
) -> VoucherDocument:
    return VoucherBatch(settings, rasterizer=rasterizer).run(records)


def generate_voucher_documents(
    records: Sequence[VoucherRecord],
    settings: VoucherSettings | None = None,
    *,
    rasterizer: Rasterizer = rasterize,
) -> List[VoucherDocument]:
    """
    Same as generate_vouchers_pdf, but split into parts of at most
    settings.max_per_document vouchers (0 = one document).
    """
    settings = settings or get_settings()
    if not records:
        raise EmptyBatchError("Nenhum cupom para gerar PDF")

    size = settings.max_per_document or len(records)
    chunks = [records[i:i + size] for i in range(0, len(records), size)]
    day = utc_day()

    out: List[VoucherDocument] = []
    for idx, chunk in enumerate(chunks, start=1):
        batch = VoucherBatch(settings, rasterizer=rasterizer, day=day, part=idx, total_parts=len(chunks))
        out.append(batch.run(chunk))
    return out
