import pytest

from converter.core.errors import MalformedLine, ValidationError
from converter.core.parser import numbered_lines, parse_text_file

LINE = "DOC1;Juan;Perez;1234;A;555-0001;((0 0, 1 0, 1 1, 0 0))"


def test_numbered_lines_skip_blank_and_comment_lines():
    content = "// header\nfirst\n\n   \nsecond\n//trailing comment"
    assert list(numbered_lines(content)) == [(2, "first"), (5, "second")]


def test_parse_canonical_line():
    [record] = parse_text_file(LINE, ";")
    assert record.document == "DOC1"
    assert record.first_names == "Juan"
    assert record.last_names == "Perez"
    assert record.card == "1234"
    assert record.client_type == "A"
    assert record.phone == "555-0001"
    assert record.polygon.coordinates == [[[0, 0], [1, 0], [1, 1], [0, 0]]]


def test_parse_without_geometry():
    [record] = parse_text_file("DOC1;Juan;Perez;1234;A;555-0001", ";")
    assert record.polygon is None

    [record] = parse_text_file("DOC1;Juan;Perez;1234;A;555-0001;  ", ";")
    assert record.polygon is None


def test_parse_eight_fields_reads_geometry_from_last():
    [record] = parse_text_file("DOC1;Juan;Perez;1234;A;555-0001;;((0 0, 1 0, 1 1))", ";")
    assert record.polygon.coordinates == [[[0, 0], [1, 0], [1, 1], [0, 0]]]


def test_parse_trims_fields_and_handles_crlf():
    content = " DOC1 | Juan Carlos |Perez | 1234|A |555-0001\r\nDOC2|Ana|Lopez|99|B|555\r\n"
    first, second = parse_text_file(content, "|")
    assert first.document == "DOC1"
    assert first.first_names == "Juan Carlos"
    assert first.card == "1234"
    assert second.phone == "555"


def test_parse_multi_character_delimiter():
    [record] = parse_text_file("DOC1::Juan::Perez::1234::A::555", "::")
    assert record.first_names == "Juan"


def test_parse_empty_content():
    assert parse_text_file("\n// only a comment\n", ";") == []


def test_too_few_fields():
    with pytest.raises(MalformedLine) as excinfo:
        parse_text_file("DOC1;Juan;Perez;1234;A", ";")

    error = excinfo.value
    assert error.expected == 6
    assert error.got == 5
    assert error.line_number == 1
    assert "expected >=6 fields, got 5" in str(error)
    assert isinstance(error, ValidationError)


def test_line_numbers_are_absolute():
    content = "// header\n\n" + LINE + "\nDOC2;Ana"
    with pytest.raises(MalformedLine) as excinfo:
        parse_text_file(content, ";")
    assert excinfo.value.line_number == 4
    assert str(excinfo.value).startswith("line 4:")


def test_too_many_fields():
    with pytest.raises(MalformedLine, match="at most 8"):
        parse_text_file("a;b;c;d;e;f;g;h;i", ";")


def test_strict_geometry_failure_names_the_text():
    with pytest.raises(MalformedLine, match=r"\(\(0 0, x y\)\)"):
        parse_text_file("DOC1;Juan;Perez;1234;A;555;((0 0, x y))", ";")


def test_lenient_geometry_drops_polygon():
    [record] = parse_text_file(
        "DOC1;Juan;Perez;1234;A;555;((0 0, x y))", ";", strict_geometry=False
    )
    assert record.polygon is None
    assert record.document == "DOC1"


def test_only_newline_separates_records():
    [record] = parse_text_file("DOC1;Ana\u2028Maria;Perez;1234;A;555-0001", ";")
    assert record.first_names == "Ana\u2028Maria"


def test_record_separator_as_delimiter():
    [record] = parse_text_file("DOC1\x1eJuan\x1ePerez\x1e1234\x1eA\x1e555-0001\n", "\x1e")
    assert record.document == "DOC1"
    assert record.phone == "555-0001"
