# voucher_pdf/services/keys.py
from __future__ import annotations

from datetime import datetime, timezone


def utc_day(now: datetime | None = None) -> str:
    if not now:
        now = datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%d")


def document_filename(prefix: str, day: str, part: int = 1, total_parts: int = 1) -> str:
    """
    cupons_show_premios_2026-10-19.pdf
    cupons_show_premios_parte2_de_3_2026-10-19.pdf
    """
    if total_parts > 1:
        return f"{prefix}_parte{part}_de_{total_parts}_{day}.pdf"
    return f"{prefix}_{day}.pdf"
