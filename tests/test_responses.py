from ecom_product_api.responses import (
    ApiResponse,
    Failure,
    ParseFailure,
    TransportFailure,
    parse_xml,
)


def test_parse_xml_returns_document_with_namespace(item_search_xml):
    result = parse_xml(item_search_xml, status=200, url="http://h/onca/xml?x=1")

    assert isinstance(result, ApiResponse)
    assert result.ok and bool(result)
    assert result.namespace == "http://webservices.amazon.com/AWSECommerceService/2011-08-01"
    assert result.findtext("Items/TotalResults") == "2"
    assert [el.findtext("{*}ASIN") for el in result.findall("Items/Item")] == ["B000000001", "B000000002"]
    assert result.find(".//Title").text == "Trail Shoes"
    assert result.findtext("Items/Missing", "n/a") == "n/a"


def test_malformed_body_is_a_parse_failure():
    result = parse_xml(b"<unterminated", status=200)

    assert isinstance(result, ParseFailure)
    assert isinstance(result, Failure)
    assert not result
    assert result.ok is False
    assert result.status == 200
    assert result.body == "<unterminated"
    assert result.reason.startswith("malformed XML")


def test_empty_body_is_a_parse_failure():
    assert isinstance(parse_xml(b""), ParseFailure)


def test_transport_failure_is_falsy_and_distinct():
    failure = TransportFailure(reason="ClientConnectorError: refused", url="http://h/onca/xml")

    assert not failure
    assert not isinstance(failure, ParseFailure)
    assert failure.reason.startswith("ClientConnectorError")


def test_to_dict_strips_namespaces_and_collapses_repeats(item_search_xml):
    data = parse_xml(item_search_xml).to_dict()

    items = data["ItemSearchResponse"]["Items"]
    assert items["TotalResults"] == "2"
    assert [i["ASIN"] for i in items["Item"]] == ["B000000001", "B000000002"]
    assert items["Item"][1]["ItemAttributes"]["Title"] == "Road Shoes"


def test_to_dict_keeps_attributes_and_text():
    doc = parse_xml('<Price currency="INR" kind="list">499<Note>sale</Note></Price>')

    assert doc.to_dict() == {
        "Price": {"@currency": "INR", "@kind": "list", "Note": "sale", "#text": "499"}
    }
    assert parse_xml("<Empty/>").to_dict() == {"Empty": None}


def test_to_dict_keeps_text_after_child_elements():
    review = parse_xml("<Review>Great <b>value</b> for money</Review>").to_dict()["Review"]

    assert review["b"] == "value"
    assert review["#text"].startswith("Great")
    assert "for money" in review["#text"]


def test_to_dict_strips_attribute_namespaces():
    doc = parse_xml(b'<r xmlns="urn:a" xmlns:x="urn:x"><Item x:id="7">t</Item></r>')

    assert doc.to_dict() == {"r": {"Item": {"@id": "7", "#text": "t"}}}


def test_unknown_declared_encoding_is_a_parse_failure():
    result = parse_xml(b'<?xml version="1.0" encoding="bogus-enc"?><a/>', status=200)

    assert isinstance(result, ParseFailure)
    assert result.status == 200
    assert "bogus-enc" in result.body


def test_failure_repr_does_not_expose_signed_url():
    failure = TransportFailure(reason="timeout", url="http://h/onca/xml?AWSAccessKeyId=AK&Signature=abc")

    assert "Signature" not in repr(failure)
    assert "AWSAccessKeyId" not in repr(failure)
    assert failure.url.endswith("Signature=abc")
