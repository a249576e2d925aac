from __future__ import annotations

from typing import Callable, List, Tuple

from normalizer import Party, PaymentRecord

BLOCK_START = "{4:"
BLOCK_END = "-}"

CHARGE_CODES = {
    "DEBT": "OUR",
    "CRED": "BEN",
    "SHAR": "SHA",
}


def charge_code(code: str) -> str:
    return CHARGE_CODES.get(code, code)


def _party_lines(party: Party) -> List[str]:
    # "/account" then name and address lines, each only when non-empty
    return [f"/{party.account}", *filter(None, (party.name, *party.address_lines))]


TAGS: Tuple[Tuple[str, Callable[[PaymentRecord], List[str]]], ...] = (
    ("20", lambda r: [r.instruction_id]),
    ("23B", lambda r: ["CRED"]),
    ("32A", lambda r: [f"{r.value_date}{r.currency}{r.amount}"]),
    ("50K", lambda r: _party_lines(r.debtor)),
    ("52A", lambda r: [r.debtor_agent_bic]),
    ("53A", lambda r: [r.instructing_reimbursement_agent_bic]),
    ("54A", lambda r: [r.instructed_reimbursement_agent_bic]),
    ("57A", lambda r: [r.creditor_agent_bic]),
    ("59", lambda r: _party_lines(r.creditor)),
    ("70", lambda r: [r.remittance_information]),
    ("71A", lambda r: [charge_code(r.charge_bearer_code)]),
)


def render_tag(tag: str, lines: List[str]) -> List[str]:
    first, *rest = lines
    return [f":{tag}:{first}", *rest]


def build_mt103(record: PaymentRecord) -> str:
    """Renders the block 4 text of an MT103 for ``record``.

    Every tag is written even when its value is empty, in the fixed order of
    ``TAGS``, between the ``{4:`` and ``-}`` lines. No trailing newline.
    """
    lines = [BLOCK_START]
    for tag, render in TAGS:
        lines.extend(render_tag(tag, render(record)))
    lines.append(BLOCK_END)
    return "\n".join(lines)
