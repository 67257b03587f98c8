import pytest

from voucher_pdf.config import VoucherSettings, get_settings

ENV_VARS = [
    "VOUCHER_LAYOUT",
    "VOUCHER_RASTER_SCALE",
    "VOUCHER_IMAGE_FORMAT",
    "VOUCHER_JPEG_QUALITY",
    "VOUCHER_SKIP_POLICY",
    "VOUCHER_FILENAME_PREFIX",
    "VOUCHER_MAX_PER_DOCUMENT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert get_settings() == VoucherSettings()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("VOUCHER_LAYOUT", "Ticket")
    monkeypatch.setenv("VOUCHER_RASTER_SCALE", "3")
    monkeypatch.setenv("VOUCHER_IMAGE_FORMAT", "jpeg")
    monkeypatch.setenv("VOUCHER_SKIP_POLICY", "blank")
    monkeypatch.setenv("VOUCHER_FILENAME_PREFIX", "cupons")
    monkeypatch.setenv("VOUCHER_MAX_PER_DOCUMENT", "50")

    s = get_settings()
    assert (s.layout, s.raster_scale, s.image_format) == ("ticket", 3, "jpeg")
    assert (s.skip_policy, s.filename_prefix, s.max_per_document) == ("blank", "cupons", 50)


@pytest.mark.parametrize(
    "name, value",
    [
        ("VOUCHER_LAYOUT", "poster"),
        ("VOUCHER_RASTER_SCALE", "0"),
        ("VOUCHER_RASTER_SCALE", "1.5"),
        ("VOUCHER_JPEG_QUALITY", "101"),
        ("VOUCHER_SKIP_POLICY", "retry"),
        ("VOUCHER_MAX_PER_DOCUMENT", "-1"),
    ],
)
def test_invalid_values_name_the_variable(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError, match=name):
        get_settings()
