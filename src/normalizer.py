from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from xmltree import ATTRIBUTES_KEY, TEXT_KEY

_PLACEHOLDER = re.compile("NOTPROVIDED", re.IGNORECASE)


@dataclass(frozen=True)
class Party:
    name: str = ""
    address_lines: Tuple[str, ...] = ()
    account: str = ""


@dataclass(frozen=True)
class PaymentRecord:
    instruction_id: str = ""
    value_date: str = ""
    currency: str = ""
    amount: str = ""
    debtor: Party = field(default_factory=Party)
    creditor: Party = field(default_factory=Party)
    debtor_agent_bic: str = ""
    instructing_reimbursement_agent_bic: str = ""
    instructed_reimbursement_agent_bic: str = ""
    creditor_agent_bic: str = ""
    remittance_information: str = ""
    charge_bearer_code: str = ""


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _iter_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    if value is None or value == "":
        return []
    return [value]


def _first(value: Any) -> Any:
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _scalar(value: Any) -> Any:
    value = _first(value)
    if isinstance(value, dict):
        return value.get(TEXT_KEY)
    return value


def dig(node: Any, *path: str) -> Any:
    """Walks ``path`` through the tree, returning None as soon as a step is missing.

    A repeated element met on the way counts as its first occurrence, so a
    single node and a sequence of one read the same.
    """
    current = node
    for key in path:
        current = _as_dict(_first(current)).get(key)
        if current is None:
            return None
    return current


def clean(value: Any) -> str:
    value = _scalar(value)
    if value is None or value == "":
        return ""
    return _PLACEHOLDER.sub("", str(value)).strip()


def clean_lines(value: Any) -> Tuple[str, ...]:
    lines = (clean(line) for line in _iter_list(value))
    return tuple(line for line in lines if line)


def _parse_timestamp(value: str) -> Optional[datetime]:
    if not value:
        return None
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_date_yymmdd(value: Any) -> str:
    parsed = _parse_timestamp(clean(value))
    if parsed is None:
        return ""
    return f"{parsed.year % 100:02d}{parsed.month:02d}{parsed.day:02d}"


def format_amount(value: Any) -> str:
    # 100 -> 100,00 and 100.5 -> 100,5; only a missing fraction gets padded
    amount = clean(value)
    if not amount:
        return ""
    amount = amount.replace(".", ",", 1)
    if "," not in amount:
        amount += ",00"
    return amount


def resolve_amount(node: Any) -> Tuple[str, str]:
    """Returns ``(currency, amount)`` for a settlement amount node.

    The node is either bare text or text carrying a ``Ccy`` attribute.
    """
    node = _first(node)
    currency = clean(_as_dict(_as_dict(node).get(ATTRIBUTES_KEY)).get("Ccy"))
    return currency, format_amount(node)


def _party(party_node: Any, account: str) -> Party:
    return Party(
        name=clean(dig(party_node, "Nm")),
        address_lines=clean_lines(dig(party_node, "PstlAdr", "AdrLine")),
        account=account,
    )


def _bic(node: Any, *path: str) -> str:
    return clean(dig(node, *path, "FinInstnId", "BICFI"))


def normalize(credit_transfer: Any) -> PaymentRecord:
    group_header = _first(dig(credit_transfer, "GrpHdr"))
    transaction = _first(dig(credit_transfer, "CdtTrfTxInf"))
    settlement_info = dig(group_header, "SttlmInf")

    value_date = (format_date_yymmdd(dig(transaction, "IntrBkSttlmDt"))
                  or format_date_yymmdd(dig(group_header, "CreDtTm")))
    currency, amount = resolve_amount(dig(transaction, "IntrBkSttlmAmt"))

    debtor_account = clean(dig(transaction, "DbtrAcct", "Id", "IBAN"))
    creditor_account = (clean(dig(transaction, "CdtrAcct", "Id", "Othr", "Id"))
                        or clean(dig(transaction, "CdtrAcct", "Id", "IBAN")))

    remittance = ",".join(clean_lines(dig(transaction, "RmtInf", "Ustrd")))

    return PaymentRecord(
        instruction_id=clean(dig(transaction, "PmtId", "InstrId")),
        value_date=value_date,
        currency=currency,
        amount=amount,
        debtor=_party(dig(transaction, "Dbtr"), debtor_account),
        creditor=_party(dig(transaction, "Cdtr"), creditor_account),
        debtor_agent_bic=_bic(transaction, "DbtrAgt"),
        instructing_reimbursement_agent_bic=_bic(settlement_info, "InstgRmbrsmntAgt"),
        instructed_reimbursement_agent_bic=_bic(settlement_info, "InstdRmbrsmntAgt"),
        creditor_agent_bic=_bic(transaction, "CdtrAgt"),
        remittance_information=remittance,
        charge_bearer_code=clean(dig(transaction, "ChrgBr")),
    )
