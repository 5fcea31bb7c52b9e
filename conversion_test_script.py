#!/usr/bin/env python3
"""
Manual smoke script for the converter endpoints.
Run the server first (``client-converter``), then this script. It walks a
small text file through txt-to-json, txt-to-xml and back through
json-xml-to-txt using multipart/form-data uploads.
"""

from pathlib import Path

import requests

# Configuration
BASE_URL = "http://127.0.0.1:8000/converter"
TEST_FILE_PATH = Path("clients_sample.txt")
DELIMITER = ";"
KEY = "mypassword123"


def create_test_file():
    """Create a sample client file for uploading."""
    content = "\n".join(
        [
            "// documento;nombres;apellidos;tarjeta;tipo;telefono;poligono",
            "DOC1;Juan;Perez;1234;A;555-0001;((0 0, 1 0, 1 1, 0 0))",
            "DOC2;Ana Maria;Lopez;98765;B;555-0002;((-90.7695083618164 17.817752838134766, -90.743 17.82, -90.75 17.81))",
            "DOC3;Luis;Gomez & Hijos;4321;C;555-0003",
        ]
    )
    TEST_FILE_PATH.write_text(content, encoding="utf-8")
    print(f"Created test file: {TEST_FILE_PATH}")


def convert(endpoint, file_name, content, content_type):
    response = requests.post(
        f"{BASE_URL}/{endpoint}",
        files={"file": (file_name, content, content_type)},
        data={"delimiter": DELIMITER, "key": KEY},
    )
    print(f"{endpoint} Response Status: {response.status_code}")
    if response.status_code != 200:
        print(f"{endpoint} failed: {response.text}")
        return None
    return response.text


def run_round_trip(endpoint, content_type, extension):
    print(f"\n=== Round trip through {endpoint} ===")

    document = convert(endpoint, TEST_FILE_PATH.name, TEST_FILE_PATH.read_bytes(), "text/plain")
    if document is None:
        return False
    print(document)

    text = convert("json-xml-to-txt", f"clients{extension}", document.encode(), content_type)
    if text is None:
        return False
    print(text)
    return True


def main():
    """Main smoke function."""
    print("🚀 Starting conversion round trips")

    create_test_file()

    ok = run_round_trip("txt-to-json", "application/json", ".json")
    ok = run_round_trip("txt-to-xml", "application/xml", ".xml") and ok

    TEST_FILE_PATH.unlink(missing_ok=True)

    print("\n✅ Round trips completed!" if ok else "\n❌ Round trips failed")


if __name__ == "__main__":
    main()
