from mimekit.types import Exchange, Headers, ResponseExchange, WireRequest, WireResponse, is_success


def test_headers_are_case_insensitive():
    headers = Headers({"Content-Type": "application/json"})
    headers["ACCEPT"] = "text/xml"

    assert headers["content-type"] == "application/json"
    assert headers.get("accept") == "text/xml"
    assert list(headers) == ["Content-Type", "ACCEPT"]

    del headers["CONTENT-TYPE"]
    assert "Content-Type" not in headers


def test_content_length_prefers_declared_value():
    message = WireRequest(headers={"Content-Length": "3"}, body=b"abcdef")

    assert message.content_length == 3
    assert message.read_body() == b"abc"

    message.headers["Content-Length"] = "bogus"
    assert message.content_length == 6


def test_write_body_sets_length():
    response = WireResponse()
    response.write_body(b"hello")

    assert response.headers["Content-Length"] == "5"
    assert response.read_body() == b"hello"


def test_status_ranges():
    assert is_success(200) and is_success(299)
    assert not is_success(199) and not is_success(300)
    assert not WireResponse(status_code=500).ok


def test_wire_types_satisfy_exchange_protocols():
    assert isinstance(WireRequest(), Exchange)
    assert isinstance(WireResponse(), ResponseExchange)
