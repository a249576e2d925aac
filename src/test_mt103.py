from mt103 import build_mt103, charge_code
from normalizer import Party, PaymentRecord

TAG_ORDER = [":20:", ":23B:", ":32A:", ":50K:", ":52A:", ":53A:", ":54A:", ":57A:", ":59:", ":70:", ":71A:"]

def _tags(text):
    return [line[:line.index(":", 1) + 1] for line in text.split("\n") if line.startswith(":")]

def test_empty_record_has_every_tag_in_order():
    text = build_mt103(PaymentRecord())
    lines = text.split("\n")
    assert lines[0] == "{4:"
    assert lines[-1] == "-}"
    assert _tags(text) == TAG_ORDER
    assert ":23B:CRED" in lines
    assert ":50K:/" in lines and ":59:/" in lines
    assert ":32A:" in lines and ":71A:" in lines

def test_no_trailing_newline():
    assert build_mt103(PaymentRecord()).endswith("-}")

def test_output_is_idempotent():
    record = PaymentRecord(instruction_id="X1", amount="1,00", currency="EUR", value_date="260105",
                           debtor=Party("A", ("L1", "L2"), "IBAN1"))
    assert build_mt103(record) == build_mt103(record)

def test_party_block_lines():
    record = PaymentRecord(debtor=Party("John Doe", ("Line 1", "Line 2"), "DE89370400440532013000"),
                           creditor=Party("", ("Only address",), "987654"))
    lines = build_mt103(record).split("\n")
    i = lines.index(":50K:/DE89370400440532013000")
    assert lines[i + 1:i + 4] == ["John Doe", "Line 1", "Line 2"]
    assert lines[i + 4] == ":52A:"
    j = lines.index(":59:/987654")
    assert lines[j + 1] == "Only address"
    assert lines[j + 2] == ":70:"

def test_charge_code_mapping():
    assert charge_code("DEBT") == "OUR"
    assert charge_code("CRED") == "BEN"
    assert charge_code("SHAR") == "SHA"
    assert charge_code("XYZZ") == "XYZZ"
    assert charge_code("") == ""

def test_charge_code_rendered_in_71a():
    text = build_mt103(PaymentRecord(charge_bearer_code="DEBT"))
    assert ":71A:OUR" in text.split("\n")

def test_32a_concatenates_without_separators():
    text = build_mt103(PaymentRecord(value_date="260105", currency="USD", amount="100,00"))
    assert ":32A:260105USD100,00" in text.split("\n")
