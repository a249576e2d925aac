import pytest
from errors import DecodeFailure
from xmltree import decode

def test_leaf_is_text():
    assert decode("<A><B>hello</B></A>") == {"A": {"B": "hello"}}

def test_attributed_element_keeps_value_and_attributes():
    tree = decode('<Amt Ccy="USD">100</Amt>')
    assert tree == {"Amt": {"$": {"Ccy": "USD"}, "_": "100"}}

def test_single_child_is_not_a_list():
    tree = decode("<PstlAdr><AdrLine>one</AdrLine></PstlAdr>")
    assert tree["PstlAdr"]["AdrLine"] == "one"

def test_repeated_children_become_ordered_list():
    tree = decode("<PstlAdr><AdrLine>one</AdrLine><AdrLine>two</AdrLine><AdrLine>three</AdrLine></PstlAdr>")
    assert tree["PstlAdr"]["AdrLine"] == ["one", "two", "three"]

def test_namespaces_are_stripped():
    xml = '<Document xmlns="urn:iso:std:iso:20022:tech:xsd:pacs.008.001.08"><FIToFICstmrCdtTrf><GrpHdr><MsgId>1</MsgId></GrpHdr></FIToFICstmrCdtTrf></Document>'
    assert decode(xml) == {"Document": {"FIToFICstmrCdtTrf": {"GrpHdr": {"MsgId": "1"}}}}

def test_empty_element_is_empty_string():
    assert decode("<A><B/></A>") == {"A": {"B": ""}}

def test_recovers_bare_ampersand_and_bom():
    tree = decode(b"\xef\xbb\xbf<A><Nm>Smith & Sons</Nm></A>")
    assert tree["A"]["Nm"] == "Smith & Sons"

def test_garbage_raises_decode_failure():
    with pytest.raises(DecodeFailure):
        decode("<A><B></A>")

def test_empty_input_raises_decode_failure():
    with pytest.raises(DecodeFailure):
        decode("   ")

def test_text_input_ignores_declared_latin1_encoding():
    xml = '<?xml version="1.0" encoding="ISO-8859-1"?><A><Nm>Müller</Nm></A>'
    assert decode(xml)["A"]["Nm"] == "Müller"

def test_text_input_ignores_declared_utf16_encoding():
    xml = '<?xml version="1.0" encoding="UTF-16"?><A><Nm>Müller</Nm></A>'
    assert decode(xml)["A"]["Nm"] == "Müller"

def test_bytes_input_honours_declared_encoding():
    xml = '<?xml version="1.0" encoding="ISO-8859-1"?><A><Nm>Müller</Nm></A>'.encode("latin-1")
    assert decode(xml)["A"]["Nm"] == "Müller"

def test_deep_nesting_does_not_hit_recursion_limit():
    depth = 5000
    tree = decode("<A>" + "<X>" * depth + "deep" + "</X>" * depth + "</A>")
    node = tree["A"]
    for _ in range(depth):
        node = node["X"]
    assert node == "deep"
