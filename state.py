"""Framework-agnostic transaction state container.

UI layers observe a :class:`TransactionStore` through :meth:`subscribe`
instead of sharing mutable globals. Actions never raise: failures come back
as an :class:`ActionResult` and are also kept on ``store.error``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from analytics import calculate_totals
from filters import query_transactions
from schemas import (
    CreateTransactionRequest,
    TransactionFilters,
    TransactionRecord,
    UpdateTransactionRequest,
)
from services import TransactionService


logger = logging.getLogger(__name__)

StoreErrors = (ValueError, RuntimeError, SQLAlchemyError)
Listener = Callable[["TransactionStore"], None]


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    value: Any = None
    error: Optional[str] = None


class TransactionStore:
    def __init__(self, service: TransactionService) -> None:
        self.service = service
        self.transactions: list[TransactionRecord] = []
        self.loading = False
        self.error: Optional[str] = None
        self.filters = TransactionFilters()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        for listener in list(self._listeners):
            listener(self)

    def _fail(self, action: str, exc: Exception) -> ActionResult:
        message = str(exc) or f"Failed to {action}"
        logger.error(f"store_action_failed: action={action} error={message}")
        self._set(error=message, loading=False)
        return ActionResult(ok=False, error=message)

    def _apply(self, transactions: list[TransactionRecord]) -> list[TransactionRecord]:
        return query_transactions(transactions, self.filters)

    def load_transactions(self) -> ActionResult:
        self._set(loading=True, error=None)
        try:
            transactions = self.service.find_all(self.filters)
        except StoreErrors as exc:
            return self._fail("load transactions", exc)
        self._set(transactions=transactions, loading=False)
        logger.info(f"store_loaded: count={len(transactions)}")
        return ActionResult(ok=True, value=transactions)

    def refresh(self) -> ActionResult:
        return self.load_transactions()

    def add_transaction(self, request: CreateTransactionRequest) -> ActionResult:
        self._set(loading=True, error=None)
        try:
            created = self.service.create(request)
        except StoreErrors as exc:
            return self._fail("add transaction", exc)
        self._set(transactions=self._apply([created, *self.transactions]), loading=False)
        return ActionResult(ok=True, value=created)

    def update_transaction(
        self, transaction_id: str, changes: UpdateTransactionRequest
    ) -> ActionResult:
        self._set(loading=True, error=None)
        try:
            updated = self.service.update(transaction_id, changes)
        except StoreErrors as exc:
            return self._fail("update transaction", exc)
        transactions = [updated if t.id == transaction_id else t for t in self.transactions]
        self._set(transactions=self._apply(transactions), loading=False)
        return ActionResult(ok=True, value=updated)

    def _toggle_archive(self, transaction_id: str, archived: bool) -> ActionResult:
        changes = UpdateTransactionRequest(is_archived=archived)
        return self.update_transaction(transaction_id, changes)

    def archive_transaction(self, transaction_id: str) -> ActionResult:
        return self._toggle_archive(transaction_id, True)

    def unarchive_transaction(self, transaction_id: str) -> ActionResult:
        result = self._toggle_archive(transaction_id, False)
        if result.ok and all(t.id != transaction_id for t in self.transactions):
            # Archived rows were not in the list; bring the restored one back.
            self._set(transactions=self._apply([result.value, *self.transactions]))
        return result

    def delete_transaction(self, transaction_id: str) -> ActionResult:
        self._set(loading=True, error=None)
        try:
            self.service.delete(transaction_id)
        except StoreErrors as exc:
            return self._fail("delete transaction", exc)
        transactions = [t for t in self.transactions if t.id != transaction_id]
        self._set(transactions=transactions, loading=False)
        return ActionResult(ok=True)

    def clear_all(self) -> ActionResult:
        self._set(loading=True, error=None)
        try:
            removed = self.service.clear_all()
        except StoreErrors as exc:
            return self._fail("clear transactions", exc)
        self._set(transactions=[], loading=False)
        return ActionResult(ok=True, value=removed)

    def set_filters(self, changes: Mapping[str, Any]) -> ActionResult:
        """Merge ``changes`` into the current filters and reload."""

        try:
            merged = TransactionFilters(**{**self.filters.model_dump(), **changes})
        except ValueError as exc:
            return self._fail("set filters", exc)
        self._set(filters=merged)
        return self.load_transactions()

    def clear_filters(self) -> ActionResult:
        self._set(filters=TransactionFilters())
        return self.load_transactions()

    def get_balance(self) -> dict[str, int]:
        income, expenses = calculate_totals(self.transactions)
        return {"income": income, "expenses": expenses, "total": income - expenses}

    @property
    def total_income(self) -> int:
        return self.get_balance()["income"]

    @property
    def total_expenses(self) -> int:
        return self.get_balance()["expenses"]

    def get_filtered_transactions(self) -> list[TransactionRecord]:
        return list(self.transactions)

    def get_total_count(self) -> int:
        return len(self.transactions)
