"""Probable-duplicate detection for bank-statement imports.

A candidate is a probable re-import of a stored transaction when both share
``date`` and ``card`` and their amounts differ by less than one minor unit.
The result is advisory: callers set ``is_duplicate`` and decide themselves
whether flagged rows get skipped.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from schemas import TransactionRecord


def _field(candidate: Any, name: str) -> Any:
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


def is_probable_duplicate(existing: TransactionRecord, candidate: Any) -> bool:
    date = _field(candidate, "date")
    card = _field(candidate, "card")
    amount = _field(candidate, "amount")
    if not date or not card or amount is None:
        return False
    return (
        existing.date == date
        and existing.card == card
        and abs(existing.amount - amount) < 1
    )


def find_potential_duplicates(
    transactions: Iterable[TransactionRecord], candidate: Any
) -> list[TransactionRecord]:
    """Stored transactions ``candidate`` probably duplicates.

    ``candidate`` may be a partial record (a mapping or any object with
    ``date``/``card``/``amount`` attributes); when one of those is missing the
    result is empty.
    """

    return [txn for txn in transactions if is_probable_duplicate(txn, candidate)]

