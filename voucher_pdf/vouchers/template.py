# voucher_pdf/vouchers/template.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from voucher_pdf.layout.planner import CANVAS_H, CANVAS_W
from voucher_pdf.vouchers.formatting import format_date_br, format_money_br
from voucher_pdf.vouchers.record import VoucherRecord

TEMPLATE_DIR = Path(__file__).parent / "templates"

_jinja = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    undefined=StrictUndefined,
)

CUSTOMER_KIND_LABELS = {"varejo": "Varejo", "atacado": "Atacado"}


@dataclass(frozen=True)
class VoucherComposition:
    """
    A styled, fixed-size voucher ready for the off-screen surface.
    `fields` keeps the display strings that went into the markup.
    """
    html: str
    css: str
    width: float = CANVAS_W
    height: float = CANVAS_H
    fields: Dict[str, str] = field(default_factory=dict)


def _load_css() -> str:
    return (TEMPLATE_DIR / "voucher.css").read_text(encoding="utf-8")


_CSS = _load_css()


def voucher_fields(record: VoucherRecord) -> Dict[str, str]:
    return {
        "code": record.code,
        "customer_name": record.customer_name,
        "customer_tax_id": record.customer_tax_id,
        "store_name": record.store_name,
        "mall_name": record.mall_name,
        "customer_phone": record.customer_phone,
        "customer_email": record.customer_email,
        "seller_name": record.seller_name,
        "customer_kind": CUSTOMER_KIND_LABELS[record.customer_kind],
        "purchase_value": format_money_br(record.purchase_value),
        "attribution_date": format_date_br(record.attribution_date),
    }


def _client_rows(f: Dict[str, str]) -> List[List[Tuple[str, str]]]:
    # fixed 2-column grid; same shape for every record
    return [
        [("Cliente", f["customer_name"]), ("CPF", f["customer_tax_id"])],
        [("Loja", f["store_name"]), ("Shopping", f["mall_name"])],
        [("Telefone", f["customer_phone"]), ("E-mail", f["customer_email"])],
        [("Vendedor", f["seller_name"]), ("Tipo", f["customer_kind"])],
    ]


def render(record: VoucherRecord) -> VoucherComposition:
    f = voucher_fields(record)
    html = _jinja.get_template("voucher.html").render(
        code=f["code"],
        client_rows=_client_rows(f),
        purchase_value=f["purchase_value"],
        attribution_date=f["attribution_date"],
    )
    return VoucherComposition(html=html, css=_CSS, fields=f)
