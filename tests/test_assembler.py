import io

import fitz  # PyMuPDF
import pytest
from pypdf import PdfReader

from conftest import png_bytes
from voucher_pdf.errors import AssemblerError, EmptyDocumentError
from voucher_pdf.layout.planner import layout_geometry
from voucher_pdf.rendering.assembler import DocumentAssembler
from voucher_pdf.rendering.rasterizer import RasterImage


def _img(color=(10, 120, 200)) -> RasterImage:
    return RasterImage(data=png_bytes(color=color), width_px=6, height_px=4)


def test_first_page_is_implicit():
    g = layout_geometry("grid")
    asm = DocumentAssembler(g)
    asm.embed(_img(), *g.slot_origin(0), g.item_w, g.item_h)
    data = asm.finalize()
    assert asm.page_count == 1
    assert len(PdfReader(io.BytesIO(data)).pages) == 1


def test_add_page_on_a_blank_page_does_not_emit_an_empty_page():
    g = layout_geometry("grid")
    asm = DocumentAssembler(g)
    asm.add_page()
    asm.embed(_img(), *g.slot_origin(0), g.item_w, g.item_h)
    asm.add_page()
    asm.add_page()
    asm.embed(_img(), *g.slot_origin(0), g.item_w, g.item_h)
    asm.add_page()

    data = asm.finalize()
    assert asm.page_count == 2
    assert len(PdfReader(io.BytesIO(data)).pages) == 2


def test_embed_uses_planner_coordinates_top_left():
    g = layout_geometry("grid")
    asm = DocumentAssembler(g)
    colors = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (0, 0, 0)]
    for slot, color in enumerate(colors):
        asm.embed(_img(color), *g.slot_origin(slot), g.item_w, g.item_h)
    data = asm.finalize()

    doc = fitz.open(stream=data, filetype="pdf")
    try:
        page = doc.load_page(0)
        assert page.rect.width == pytest.approx(g.page_w)
        boxes = sorted((round(i["bbox"][0]), round(i["bbox"][1])) for i in page.get_image_info())
        sizes = {(round(i["bbox"][2] - i["bbox"][0]), round(i["bbox"][3] - i["bbox"][1])) for i in page.get_image_info()}
    finally:
        doc.close()

    expected = sorted((round(x), round(y)) for x, y in (g.slot_origin(s) for s in range(4)))
    assert boxes == expected
    assert sizes == {(round(g.item_w), round(g.item_h))}


def test_finalize_is_idempotent():
    g = layout_geometry("ticket")
    asm = DocumentAssembler(g, title="cupons_show_premios_2026-10-19.pdf")
    asm.embed(_img(), *g.slot_origin(0), g.item_w, g.item_h)
    first = asm.finalize()
    assert asm.finalize() == first
    assert asm.is_finalized


def test_no_mutation_after_finalize():
    g = layout_geometry("grid")
    asm = DocumentAssembler(g)
    asm.embed(_img(), *g.slot_origin(0), g.item_w, g.item_h)
    asm.finalize()
    with pytest.raises(AssemblerError):
        asm.embed(_img(), *g.slot_origin(1), g.item_w, g.item_h)
    with pytest.raises(AssemblerError):
        asm.add_page()


def test_empty_document_is_refused():
    asm = DocumentAssembler(layout_geometry("grid"))
    with pytest.raises(EmptyDocumentError):
        asm.finalize()


def test_title_is_written_to_metadata():
    g = layout_geometry("grid")
    asm = DocumentAssembler(g, title="cupons_show_premios_2026-10-19.pdf")
    asm.embed(_img(), *g.slot_origin(0), g.item_w, g.item_h)
    meta = PdfReader(io.BytesIO(asm.finalize())).metadata
    assert meta.title == "cupons_show_premios_2026-10-19.pdf"
