import io

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader

from voucher_pdf import api_main
from voucher_pdf.errors import SurfaceError


@pytest.fixture
def client():
    return TestClient(api_main.app)


def _record(i: int, **overrides) -> dict:
    rec = {
        "numero_formatado": f"CP{i:012d}",
        "nome_cliente": f"Cliente {i}",
        "cpf_cliente": "123.456.789-00",
        "nome_loja": "Loja",
        "shopping": "Shopping Center Norte",
        "data_atribuicao": "2026-10-18T14:32:00Z",
        "valor_compra": "150,00",
    }
    rec.update(overrides)
    return rec


def test_health(client):
    assert client.get("/api/health").json() == {"ok": True}


def test_pdf_download(client):
    resp = client.post("/api/vouchers/pdf", json={"records": [_record(i) for i in range(1, 6)]})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert 'filename="cupons_show_premios_' in resp.headers["content-disposition"]
    assert resp.headers["x-voucher-count"] == "5"
    assert resp.headers["x-voucher-pages"] == str(len(PdfReader(io.BytesIO(resp.content)).pages))


def test_empty_records_is_a_client_error(client):
    resp = client.post("/api/vouchers/pdf", json={"records": []})
    assert resp.status_code == 400


def test_missing_records(client):
    resp = client.post("/api/vouchers/pdf", json={"items": []})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Missing records"


def test_invalid_record_reports_its_index(client):
    bad = _record(2, valor_compra="-5,00")
    resp = client.post("/api/vouchers/pdf", json={"records": [_record(1), bad]})
    assert resp.status_code == 400
    assert "index 1" in resp.json()["detail"]


def test_fatal_engine_errors_are_500(client, monkeypatch):
    def broken(records, settings):
        raise SurfaceError("no surface")

    monkeypatch.setattr(api_main, "generate_vouchers_pdf", broken)
    resp = client.post("/api/vouchers/pdf", json={"records": [_record(1)]})
    assert resp.status_code == 500
    assert "SurfaceError" in resp.json()["detail"]


def test_out_of_range_amount_is_a_client_error(client):
    resp = client.post("/api/vouchers/pdf", json={"records": [_record(1), _record(2, valor_compra=1e30)]})
    assert resp.status_code == 400
    assert "index 1" in resp.json()["detail"]
