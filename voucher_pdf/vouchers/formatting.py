# voucher_pdf/vouchers/formatting.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, localcontext

# en-US grouping -> pt-BR grouping
_PT_BR_SEPARATORS = str.maketrans({",": ".", ".": ","})


def format_number_br(value: Decimal) -> str:
    value = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        q = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{q:,.2f}".translate(_PT_BR_SEPARATORS)


def format_money_br(value: Decimal) -> str:
    """Decimal('1234.5') -> 'R$ 1.234,50'"""
    return f"R$ {format_number_br(value)}"


def format_date_br(dt: datetime) -> str:
    # calendar date as recorded upstream; no timezone shift
    return dt.strftime("%d/%m/%Y")
