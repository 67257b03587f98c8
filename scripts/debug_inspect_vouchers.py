# scripts/debug_inspect_vouchers.py
from __future__ import annotations

import sys
from pathlib import Path

import fitz  # PyMuPDF
from pypdf import PdfReader


def main() -> None:
    if len(sys.argv) < 2:
        sys.exit("usage: python scripts/debug_inspect_vouchers.py <vouchers.pdf>")

    pdf_path = Path(sys.argv[1])
    r = PdfReader(str(pdf_path))
    print("Title:", (r.metadata or {}).get("/Title"))
    print("Pages:", len(r.pages))

    doc = fitz.open(str(pdf_path))
    try:
        for pno in range(doc.page_count):
            page = doc.load_page(pno)
            infos = page.get_image_info()
            print(f"\n[p{pno}] {page.rect.width:.1f}x{page.rect.height:.1f} pt, {len(infos)} vouchers")
            for info in infos:
                x0, y0, x1, y1 = info["bbox"]
                print(f"  ({x0:.1f},{y0:.1f}) {x1 - x0:.1f}x{y1 - y0:.1f} pt  <- {info['width']}x{info['height']} px")
    finally:
        doc.close()


if __name__ == "__main__":
    main()
