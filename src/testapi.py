from fastapi.testclient import TestClient
from api import app
from test_engine import SCENARIO_XML, EXPECTED

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_convert_text():
    r = client.post("/convert-text", data={"xml": SCENARIO_XML})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == EXPECTED

def test_convert_text_without_xml():
    r = client.post("/convert-text", data={"xml": "  "})
    assert r.status_code == 400

def test_convert_text_bad_xml():
    r = client.post("/convert-text", data={"xml": "<Document><oops></Document>"})
    assert r.status_code == 400
    assert r.text.startswith("Error parsing XML")

def test_convert_text_missing_structure():
    r = client.post("/convert-text", data={"xml": "<Document><Other/></Document>"})
    assert r.status_code == 422
    assert "FIToFICstmrCdtTrf" in r.text

def test_convert_file():
    r = client.post("/convert/file", files={"file": ("pacs008.xml", SCENARIO_XML.encode("utf-8"), "application/xml")})
    assert r.status_code == 200
    assert r.text == EXPECTED

def test_convert_json():
    r = client.post("/api/convert", json={"xml": SCENARIO_XML})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["mt103"] == EXPECTED

def test_convert_json_failure():
    r = client.post("/api/convert", json={"xml": "<Document/>"})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["code"] == "STRUCTURE_NOT_FOUND"

def test_convert_json_unexpected_shape(monkeypatch):
    import engine

    def broken(data):
        raise TypeError("unexpected node")

    monkeypatch.setattr(engine, "normalize", broken)
    r = client.post("/api/convert", json={"xml": SCENARIO_XML})
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["code"] == "UNEXPECTED_SHAPE"
    assert body["message"].startswith("Error converting to MT103")

def test_convert_text_unexpected_shape(monkeypatch):
    import engine

    def broken(data):
        raise TypeError("unexpected node")

    monkeypatch.setattr(engine, "normalize", broken)
    r = client.post("/convert-text", data={"xml": SCENARIO_XML})
    assert r.status_code == 500
    assert r.text.startswith("Error converting to MT103")

def test_payload_too_large(monkeypatch):
    import api
    from config import AppConfig, ApiConfig

    monkeypatch.setattr(api, "cfg", AppConfig(api=ApiConfig(max_request_mb=0)))
    r = client.post("/api/convert", json={"xml": SCENARIO_XML})
    assert r.status_code == 413
    assert r.json()["success"] is False
    r = client.post("/convert-text", data={"xml": SCENARIO_XML})
    assert r.status_code == 413

def test_deep_nesting_keeps_json_shape():
    nested = "<X>" * 3000 + "</X>" * 3000
    r = client.post("/api/convert", json={"xml": SCENARIO_XML.replace("<RmtInf>", nested + "<RmtInf>")})
    assert r.status_code == 200
    assert r.json()["mt103"] == EXPECTED

def test_convert_text_latin1_declaration():
    xml = SCENARIO_XML.replace('encoding="UTF-8"', 'encoding="ISO-8859-1"').replace("John Doe", "Jürgen Groß")
    r = client.post("/convert-text", data={"xml": xml})
    assert r.status_code == 200
    assert "Jürgen Groß" in r.text.split("\n")
