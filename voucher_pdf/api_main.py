# voucher_pdf/api_main.py
from __future__ import annotations

import logging
import os

from fastapi import Body, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from voucher_pdf.config import get_settings
from voucher_pdf.errors import EmptyBatchError, VoucherError
from voucher_pdf.services.batch import generate_vouchers_pdf
from voucher_pdf.vouchers.record import voucher_record_from_json

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Voucher PDF API")

# CORS for the admin dashboard dev servers
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in (os.getenv("CORS_ORIGINS") or "http://localhost:5173,http://127.0.0.1:5173,http://localhost:8080").split(",")
        if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Voucher-Pages", "X-Voucher-Count"],
)


@app.get("/")
def root():
    return {"ok": True, "try": ["/docs", "/api/health", "/api/vouchers/pdf"]}


@app.get("/api/health")
def health():
    return {"ok": True}


@app.post("/api/vouchers/pdf")
def vouchers_pdf(body: dict = Body(...)):
    """
    body = { "records": [ {numero_formatado|code, nome_cliente|customer_name, ...}, ... ] }
    - records are rendered in the order given
    - returns the PDF as an attachment named <prefix>_<YYYY-MM-DD>.pdf
    """
    items = body.get("records")
    if not isinstance(items, list):
        raise HTTPException(status_code=400, detail="Missing records")

    records = []
    for idx, item in enumerate(items):
        try:
            records.append(voucher_record_from_json(item))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid record at index {idx}: {e}")

    try:
        doc = generate_vouchers_pdf(records, settings)
    except EmptyBatchError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except VoucherError as e:
        logger.error("Voucher PDF generation failed: %s", e)
        raise HTTPException(status_code=500, detail=f"{type(e).__name__}: {e}"[:1000])

    return Response(
        content=doc.data,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{doc.filename}"',
            "X-Voucher-Pages": str(doc.page_count),
            "X-Voucher-Count": str(doc.voucher_count),
        },
    )
