# voucher_pdf/vouchers/record.py
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

NOT_AVAILABLE = "Não informado"

CUSTOMER_KINDS = ("varejo", "atacado")

# amounts must stay printable at cent precision
MAX_AMOUNT_DIGITS = 15

_DISPLAY_FIELDS = (
    "customer_name",
    "customer_tax_id",
    "store_name",
    "mall_name",
    "customer_phone",
    "customer_email",
    "seller_name",
)


def _clean(s: Any) -> str:
    if s is None:
        return ""
    return str(s).replace("\u00a0", " ").replace("\x00", "").strip()


def or_placeholder(s: Any) -> str:
    return _clean(s) or NOT_AVAILABLE


@dataclass(frozen=True)
class VoucherRecord:
    """One awarded coupon, as handed over by the reporting collaborator."""

    code: str
    customer_name: str
    customer_tax_id: str
    store_name: str
    mall_name: str
    attribution_date: datetime
    purchase_value: Decimal

    customer_phone: str = NOT_AVAILABLE
    customer_email: str = NOT_AVAILABLE
    seller_name: str = NOT_AVAILABLE
    customer_kind: str = "varejo"

    def __post_init__(self) -> None:
        if not _clean(self.code):
            raise ValueError("voucher code must not be empty")
        object.__setattr__(self, "code", _clean(self.code))

        # display fields never carry None/blank
        for name in _DISPLAY_FIELDS:
            object.__setattr__(self, name, or_placeholder(getattr(self, name)))

        if not isinstance(self.attribution_date, datetime):
            raise ValueError(f"{self.code}: attribution_date must be a datetime")

        value = self.purchase_value
        if not isinstance(value, Decimal):
            try:
                value = Decimal(str(value))
            except InvalidOperation:
                raise ValueError(f"{self.code}: invalid purchase_value {self.purchase_value!r}")
        if not value.is_finite() or value < 0:
            raise ValueError(f"{self.code}: purchase_value must be a non-negative amount")
        if value and value.adjusted() >= MAX_AMOUNT_DIGITS:
            raise ValueError(f"{self.code}: purchase_value {value} is out of range")
        object.__setattr__(self, "purchase_value", value)

        kind = _clean(self.customer_kind).lower() or "varejo"
        if kind not in CUSTOMER_KINDS:
            raise ValueError(f"{self.code}: unknown customer_kind {self.customer_kind!r}")
        object.__setattr__(self, "customer_kind", kind)


# =========================
# JSON boundary
# =========================

# english key -> pt-BR key
_KEY_ALIASES = {
    "code": "numero_formatado",
    "customer_name": "nome_cliente",
    "customer_tax_id": "cpf_cliente",
    "store_name": "nome_loja",
    "mall_name": "shopping",
    "attribution_date": "data_atribuicao",
    "purchase_value": "valor_compra",
    "customer_kind": "tipo_cliente",
    "customer_phone": "telefone_cliente",
    "customer_email": "email_cliente",
    "seller_name": "vendedor",
}


def _pick(j: dict, key: str) -> Any:
    if j.get(key) is not None:
        return j[key]
    return j.get(_KEY_ALIASES[key])


def parse_amount(s: Any) -> Decimal:
    """
    Accepts numbers and the string shapes seen upstream:
      1234.5 / "1234.50" / "1.234,56" / "R$ 10,00" / "1,234.56"
    """
    if isinstance(s, bool):
        raise ValueError(f"invalid amount: {s!r}")
    if isinstance(s, Decimal):
        return s
    if isinstance(s, (int, float)):
        return Decimal(str(s))

    t = _clean(s).replace("R$", "").replace("$", "").replace(" ", "")
    if not t:
        raise ValueError("missing purchase value")

    if "," in t and "." in t:
        # whichever separator comes last is the decimal one
        if t.rfind(",") > t.rfind("."):
            t = t.replace(".", "").replace(",", ".")
        else:
            t = t.replace(",", "")
    elif "," in t:
        t = t.replace(",", ".")
    elif re.fullmatch(r"\d{1,3}(\.\d{3})+", t):
        # "1.234" is pt-BR grouping, not a decimal
        t = t.replace(".", "")

    try:
        return Decimal(t)
    except InvalidOperation:
        raise ValueError(f"invalid amount: {s!r}")


_ISO_DATETIME = re.compile(
    r"(\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2})?)(?:\.(\d+))?([+-]\d{2}(?::?\d{2})?)?"
)


def _normalize_iso(t: str) -> str:
    # Postgres trims fractional seconds and may print "+00" offsets;
    # fromisoformat on 3.10 wants 6 digits and "+HH:MM"
    m = _ISO_DATETIME.fullmatch(t)
    if not m:
        return t
    base, frac, off = m.groups()
    if frac:
        base += "." + frac[:6].ljust(6, "0")
    if off:
        off = off.replace(":", "")
        base += f"{off[:3]}:{off[3:5] or '00'}"
    return base


def parse_timestamp(s: Any) -> datetime:
    if isinstance(s, datetime):
        return s
    if isinstance(s, date):
        return datetime.combine(s, time.min)

    t = _clean(s)
    if not t:
        raise ValueError("missing attribution date")
    if t.endswith("Z"):
        t = t[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(_normalize_iso(t))
    except ValueError:
        raise ValueError(f"invalid attribution date: {s!r}")


def voucher_record_from_json(j: dict) -> VoucherRecord:
    if not isinstance(j, dict):
        raise ValueError("voucher record must be an object")

    return VoucherRecord(
        code=_clean(_pick(j, "code")),
        customer_name=_pick(j, "customer_name"),
        customer_tax_id=_pick(j, "customer_tax_id"),
        store_name=_pick(j, "store_name"),
        mall_name=_pick(j, "mall_name"),
        attribution_date=parse_timestamp(_pick(j, "attribution_date")),
        purchase_value=parse_amount(_pick(j, "purchase_value")),
        customer_phone=_pick(j, "customer_phone"),
        customer_email=_pick(j, "customer_email"),
        seller_name=_pick(j, "seller_name"),
        customer_kind=_pick(j, "customer_kind") or "varejo",
    )
