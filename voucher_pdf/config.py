# voucher_pdf/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from voucher_pdf.layout.planner import LAYOUTS

# Local dev convenience: loads from .env if present.
# In deployment, env vars come from the runtime (no .env file).
load_dotenv()

SKIP_POLICIES = ("compact", "blank")
IMAGE_FORMATS = ("png", "jpeg")


@dataclass(frozen=True)
class VoucherSettings:
    """
    Per-deployment constants for the voucher engine.

      layout            -> key of voucher_pdf.layout.planner.LAYOUTS
      raster_scale      -> integer upscale applied when sampling the off-screen page
      skip_policy       -> "compact" (later vouchers shift left) | "blank" (slot stays empty)
      max_per_document  -> 0 means a single document regardless of batch size
    """
    layout: str = "grid"
    raster_scale: int = 2
    image_format: str = "png"
    jpeg_quality: int = 85
    skip_policy: str = "compact"
    filename_prefix: str = "cupons_show_premios"
    max_per_document: int = 0
    log_level: str = "INFO"


def _env_int(name: str, default: int, *, minimum: int, maximum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        val = int(raw.strip())
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")
    if val < minimum or (maximum is not None and val > maximum):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise RuntimeError(f"{name} must be {bounds}, got {val}")
    return val


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    val = (os.getenv(name) or default).strip().lower()
    if val not in choices:
        raise RuntimeError(f"{name} must be one of {', '.join(choices)}; got {val!r}")
    return val


def get_settings() -> VoucherSettings:
    return VoucherSettings(
        layout=_env_choice("VOUCHER_LAYOUT", "grid", tuple(LAYOUTS)),
        raster_scale=_env_int("VOUCHER_RASTER_SCALE", 2, minimum=1),
        image_format=_env_choice("VOUCHER_IMAGE_FORMAT", "png", IMAGE_FORMATS),
        jpeg_quality=_env_int("VOUCHER_JPEG_QUALITY", 85, minimum=1, maximum=100),
        skip_policy=_env_choice("VOUCHER_SKIP_POLICY", "compact", SKIP_POLICIES),
        filename_prefix=(os.getenv("VOUCHER_FILENAME_PREFIX") or "cupons_show_premios").strip(),
        max_per_document=_env_int("VOUCHER_MAX_PER_DOCUMENT", 0, minimum=0),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
