# scripts/render_sample_vouchers.py
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import List

from voucher_pdf.config import get_settings
from voucher_pdf.services.batch import generate_voucher_documents
from voucher_pdf.vouchers.record import VoucherRecord, voucher_record_from_json


SAMPLE_RECORDS = [
    {
        "numero_formatado": "CP000001000001",
        "nome_cliente": "Maria Aparecida dos Santos",
        "cpf_cliente": "123.456.789-00",
        "nome_loja": "Loja Bela Moda",
        "shopping": "Shopping Center Norte",
        "data_atribuicao": "2026-10-18T14:32:00Z",
        "valor_compra": 1234.56,
        "tipo_cliente": "varejo",
        "telefone_cliente": "(11) 98888-7777",
        "email_cliente": "maria@example.com",
        "vendedor": "Carlos",
    },
    {
        "numero_formatado": "CP000001000002",
        "nome_cliente": "João Pereira",
        "cpf_cliente": "987.654.321-00",
        "nome_loja": "Calçados Passo Firme",
        "shopping": "",
        "data_atribuicao": "2026-10-18",
        "valor_compra": "89,90",
        "tipo_cliente": "atacado",
    },
    {
        "numero_formatado": "CP000001000003",
        "nome_cliente": None,
        "cpf_cliente": None,
        "nome_loja": "Ótica Visão",
        "shopping": "Galeria Central",
        "data_atribuicao": "2026-10-19T09:00:00-03:00",
        "valor_compra": "R$ 15.000,00",
    },
]


def _load_records(path: Path | None) -> List[VoucherRecord]:
    if path is None:
        raw = SAMPLE_RECORDS
    else:
        raw = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(raw, dict):
            raw = raw.get("records") or []
    return [voucher_record_from_json(x) for x in raw]


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a voucher PDF from a JSON list of records")
    parser.add_argument("records", nargs="?", type=Path, help="JSON file: list of records or {'records': [...]}")
    parser.add_argument("--out", type=Path, default=Path("out"), help="Output folder")
    parser.add_argument("--layout", choices=["grid", "ticket"], help="Override VOUCHER_LAYOUT")
    parser.add_argument("--max-per-document", type=int, help="Override VOUCHER_MAX_PER_DOCUMENT")
    args = parser.parse_args()

    settings = get_settings()
    if args.layout:
        settings = replace(settings, layout=args.layout)
    if args.max_per_document is not None:
        settings = replace(settings, max_per_document=args.max_per_document)

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    records = _load_records(args.records)
    print(f"[RUN] {len(records)} vouchers, layout={settings.layout}")

    args.out.mkdir(parents=True, exist_ok=True)
    for doc in generate_voucher_documents(records, settings):
        out_path = args.out / doc.filename
        out_path.write_bytes(doc.data)
        print(f"[OK] wrote {out_path} ({doc.page_count} pages, {doc.voucher_count} vouchers)")

    print("\nDone. Open the PDFs in the output folder to review.")


if __name__ == "__main__":
    main()
