#!/usr/bin/env python3
"""
Tests for the converter endpoints using multipart/form-data uploads.
"""

import json

import pytest
from fastapi.testclient import TestClient

import converter.routers.converter as converter_module
from converter.main import app

client = TestClient(app)

KEY = "mypassword123"
DELIMITER = ";"
CONTENT = "\n".join(
    [
        "// documento;nombres;apellidos;tarjeta;tipo;telefono;poligono",
        "DOC1;Juan;Perez;1234;A;555-0001;((0 0, 1 0, 1 1, 0 0))",
        "DOC2;Ana;Gomez & Hijos;4321;B;555-0002",
    ]
)
EXPECTED_TEXT = (
    "DOC1;Juan;Perez;1234;A;555-0001;((0 0, 1 0, 1 1, 0 0))\n"
    "DOC2;Ana;Gomez & Hijos;4321;B;555-0002;"
)


def upload(endpoint, content, file_name="clients.txt", content_type="text/plain", **form):
    data = {"delimiter": DELIMITER, "key": KEY}
    data.update(form)
    if isinstance(content, str):
        content = content.encode("utf-8")
    return client.post(
        f"/converter/{endpoint}",
        files={"file": (file_name, content, content_type)},
        data=data,
    )


class TestTxtToJson:
    def test_conversion(self):
        response = upload("txt-to-json", CONTENT)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")

        clients = response.json()["clientes"]
        assert [c["documento"] for c in clients] == ["DOC1", "DOC2"]
        assert clients[0]["poligono"]["bbox"] == [0, 0, 1, 1]
        assert clients[0]["tarjeta"] != "1234"

    def test_malformed_line(self):
        response = upload("txt-to-json", "DOC1;Juan;Perez;1234;A")
        assert response.status_code == 400
        assert "expected >=6 fields, got 5" in response.json()["detail"]

    def test_short_ring(self):
        response = upload("txt-to-json", "DOC1;Juan;Perez;1234;A;555;((0 0, 1 1))")
        assert response.status_code == 400
        assert "at least 4" in response.json()["detail"]


class TestTxtToXml:
    def test_conversion(self):
        response = upload("txt-to-xml", CONTENT)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert "<poligono>POLYGON ((0 0, 1 0, 1 1, 0 0))</poligono>" in response.text

    def test_short_key(self):
        response = upload("txt-to-xml", CONTENT, key="short")
        assert response.status_code == 400
        assert "at least 8" in response.json()["detail"]

    def test_record_error_names_only_the_record(self):
        response = upload("txt-to-xml", "DOC1;Juan;;1234;A;555")
        assert response.status_code == 400
        assert response.json()["detail"] == "error processing record 1"


class TestJsonXmlToTxt:
    def test_json_round_trip(self):
        document = upload("txt-to-json", CONTENT).content

        response = upload(
            "json-xml-to-txt", document, "clients.json", "application/json"
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == EXPECTED_TEXT

    def test_xml_round_trip(self):
        document = upload("txt-to-xml", CONTENT).content

        response = upload("json-xml-to-txt", document, "clients.xml", "application/xml")
        assert response.status_code == 200
        assert response.text == EXPECTED_TEXT

    @pytest.mark.parametrize(
        ("file_name", "content_type"),
        [("export.json", "application/octet-stream"), ("export.xml", "application/octet-stream")],
    )
    def test_format_from_extension(self, file_name, content_type):
        endpoint = "txt-to-json" if file_name.endswith(".json") else "txt-to-xml"
        document = upload(endpoint, CONTENT).content

        response = upload("json-xml-to-txt", document, file_name, content_type)
        assert response.status_code == 200
        assert response.text == EXPECTED_TEXT

    def test_unsupported_file_type(self):
        response = upload("json-xml-to-txt", "a,b,c", "clients.csv", "text/csv")
        assert response.status_code == 400
        assert "Unsupported file type: text/csv" in response.json()["detail"]

    def test_wrong_key(self):
        document = upload("txt-to-json", CONTENT).content
        response = upload(
            "json-xml-to-txt", document, "clients.json", "application/json", key="another-key"
        )
        if response.status_code == 200:
            assert response.text != EXPECTED_TEXT
        else:
            assert response.status_code == 400

    def test_malformed_json(self):
        response = upload("json-xml-to-txt", "{broken", "clients.json", "application/json")
        assert response.status_code == 400
        assert "invalid JSON" in response.json()["detail"]

    def test_xml_without_clients(self):
        response = upload("json-xml-to-txt", "<clientes/>", "clients.xml", "text/xml")
        assert response.status_code == 400


class TestRequestValidation:
    @pytest.mark.parametrize("endpoint", ["txt-to-json", "txt-to-xml", "json-xml-to-txt"])
    def test_missing_key(self, endpoint):
        response = upload(endpoint, CONTENT, key="")
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing file, delimiter, or key"

    def test_missing_file(self):
        response = client.post(
            "/converter/txt-to-json", data={"delimiter": DELIMITER, "key": KEY}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing file, delimiter, or key"

    def test_non_utf8_upload(self):
        response = upload("txt-to-json", "DOC1;José".encode("latin-1"))
        assert response.status_code == 400
        assert "UTF-8" in response.json()["detail"]

    def test_file_size_limit(self, monkeypatch):
        monkeypatch.setattr(converter_module.config.files, "max_file_size", 16)
        response = upload("txt-to-json", CONTENT)
        assert response.status_code == 413

    def test_utf8_bom_is_ignored(self):
        response = upload("txt-to-json", "\ufeff" + CONTENT)
        assert response.status_code == 200
        assert json.loads(response.text)["clientes"][0]["documento"] == "DOC1"
