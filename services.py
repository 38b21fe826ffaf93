from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Union

from rapidfuzz.distance import Levenshtein
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from duplicates import find_potential_duplicates
from filters import (
    get_all_cards_for_date_range,
    get_all_categories_for_date_range,
    query_transactions,
    sort_newest_first,
)
from models import DEFAULT_CATEGORY, Transaction
from schemas import (
    CreateTransactionRequest,
    DateRange,
    ImportCandidate,
    ImportResult,
    ImportRowError,
    ImportSummary,
    ImportTimeRange,
    TransactionFilters,
    TransactionRecord,
    UpdateTransactionRequest,
)


logger = logging.getLogger(__name__)


class TransactionNotFound(ValueError):
    pass


class TransactionDeleteFailed(RuntimeError):
    pass


class ClearAllFailed(RuntimeError):
    pass


class ImportCategoryAmbiguous(ValueError):
    pass


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def normalize_category(name: Optional[str]) -> str:
    return (name or "").strip() or DEFAULT_CATEGORY


def to_record(txn: Transaction) -> TransactionRecord:
    return TransactionRecord.model_validate(txn)


class TransactionService:
    """Transaction store on top of SQLAlchemy.

    Reads return :class:`TransactionRecord` snapshots; filtering runs the same
    in-memory query used everywhere else, so the store and in-memory callers
    can never disagree about what a filter admits.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _get_row(self, transaction_id: str) -> Optional[Transaction]:
        return self.session.scalar(
            select(Transaction).where(Transaction.id == transaction_id)
        )

    def _require_row(self, transaction_id: str) -> Transaction:
        txn = self._get_row(transaction_id)
        if txn is None:
            raise TransactionNotFound(f"Transaction with id {transaction_id} not found")
        return txn

    def create(
        self,
        data: CreateTransactionRequest,
        *,
        is_duplicate: bool = False,
        transaction_id: Optional[str] = None,
    ) -> TransactionRecord:
        txn = Transaction(
            id=transaction_id or str(uuid.uuid4()),
            date=data.date,
            card=data.card,
            amount=data.amount,
            currency=data.currency.upper(),
            description=data.description,
            category=normalize_category(data.category),
            comment=data.comment,
            is_income=data.is_income,
            is_archived=False,
            is_duplicate=is_duplicate,
            created_at=_utcnow_iso(),
        )
        self.session.add(txn)
        self.session.commit()
        self.session.refresh(txn)
        logger.info(f"transaction_created: id={txn.id}")
        return to_record(txn)

    def find_by_id(self, transaction_id: str) -> Optional[TransactionRecord]:
        txn = self._get_row(transaction_id)
        return to_record(txn) if txn is not None else None

    def snapshot(self) -> list[TransactionRecord]:
        """Every stored transaction, newest first; equal dates keep storage order."""

        stmt = select(Transaction).order_by(Transaction.seq.asc())
        return sort_newest_first(to_record(txn) for txn in self.session.scalars(stmt))

    def find_all(
        self, filters: Optional[TransactionFilters] = None
    ) -> list[TransactionRecord]:
        return query_transactions(self.snapshot(), filters)

    def update(
        self, transaction_id: str, data: UpdateTransactionRequest
    ) -> TransactionRecord:
        txn = self._require_row(transaction_id)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None and field != "comment":
                continue
            if field == "currency":
                value = value.upper()
            elif field == "category":
                value = normalize_category(value)
            setattr(txn, field, value)
        self.session.commit()
        self.session.refresh(txn)
        logger.info(f"transaction_updated: id={transaction_id} fields={sorted(changes)}")
        return to_record(txn)

    def _set_archived(self, transaction_id: str, archived: bool) -> TransactionRecord:
        txn = self._require_row(transaction_id)
        txn.is_archived = archived
        self.session.commit()
        self.session.refresh(txn)
        logger.info(f"transaction_archive_toggled: id={transaction_id} archived={archived}")
        return to_record(txn)

    def archive(self, transaction_id: str) -> TransactionRecord:
        return self._set_archived(transaction_id, True)

    def unarchive(self, transaction_id: str) -> TransactionRecord:
        return self._set_archived(transaction_id, False)

    def delete(self, transaction_id: str) -> None:
        self.session.execute(delete(Transaction).where(Transaction.id == transaction_id))
        self.session.commit()
        self.session.expire_all()
        if self._get_row(transaction_id) is not None:
            raise TransactionDeleteFailed(
                f"Transaction with id {transaction_id} could not be deleted"
            )
        logger.info(f"transaction_deleted: id={transaction_id}")

    def clear_all(self) -> int:
        removed = self.get_total_count()
        self.session.execute(delete(Transaction))
        self.session.commit()
        self.session.expire_all()
        remaining = self.get_total_count()
        if remaining != 0:
            raise ClearAllFailed(
                f"Clearing transactions left {remaining} records in the store"
            )
        logger.info(f"transactions_cleared: removed={removed}")
        return removed

    def get_total_count(self) -> int:
        return int(self.session.execute(select(func.count(Transaction.seq))).scalar_one() or 0)

    def get_balance(self) -> dict[str, int]:
        income = 0
        expenses = 0
        for txn in self.find_all():
            if txn.is_income:
                income += txn.amount
            else:
                expenses += txn.amount
        return {"income": income, "expenses": expenses, "total": income - expenses}

    def get_category_totals(self) -> list[dict[str, Any]]:
        totals: dict[str, dict[str, int]] = {}
        for txn in self.find_all():
            entry = totals.setdefault(txn.category, {"total": 0, "count": 0})
            entry["total"] += txn.amount
            entry["count"] += 1
        return [
            {"category": category, "total": data["total"], "count": data["count"]}
            for category, data in totals.items()
        ]

    def get_all_cards_for_date_range(self, date_range: Optional[DateRange]) -> list[str]:
        return get_all_cards_for_date_range(self.snapshot(), date_range)

    def find_potential_duplicates(self, candidate: Any) -> list[TransactionRecord]:
        return find_potential_duplicates(self.snapshot(), candidate)


class CategoryService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_all_categories(self, date_range: Optional[DateRange] = None) -> list[str]:
        snapshot = TransactionService(self.session).snapshot()
        return get_all_categories_for_date_range(snapshot, date_range)

    def resolve(self, name: Optional[str], known: Iterable[str]) -> str:
        """Map an imported category name onto one already in use.

        Exact case-insensitive matches win; otherwise a single known category
        within one edit is taken. Unknown names are kept as given and blanks
        become the default category.
        """

        raw = (name or "").strip()
        if not raw:
            return DEFAULT_CATEGORY
        input_lower = raw.lower()
        known = list(dict.fromkeys(known))
        for category in known:
            if category.lower() == input_lower:
                return category

        best_distance: Optional[int] = None
        best: list[str] = []
        for category in known:
            dist = int(Levenshtein.distance(input_lower, category.strip().lower()))
            if best_distance is None or dist < best_distance:
                best_distance = dist
                best = [category]
            elif dist == best_distance:
                best.append(category)

        if best_distance is not None and best_distance <= 1:
            if len(best) > 1:
                options = ", ".join(sorted(best))
                raise ImportCategoryAmbiguous(
                    f"Category '{raw}' is ambiguous; matches: {options}"
                )
            return best[0]
        return raw


class ImportService:
    """Reconciles parsed bank-statement rows against the store."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.transactions = TransactionService(session)
        self.categories = CategoryService(session)

    def reconcile(self, candidates: Iterable[ImportCandidate]) -> ImportResult:
        existing = self.transactions.snapshot()
        known_categories = self.categories.get_all_categories()
        now = _utcnow_iso()

        result = ImportResult()
        rows = 0
        earliest = ""
        latest = ""
        for row, candidate in enumerate(candidates, start=1):
            rows += 1
            try:
                category = self.categories.resolve(candidate.category, known_categories)
            except ImportCategoryAmbiguous as exc:
                result.errors.append(
                    ImportRowError(row=row, column="category", error=str(exc))
                )
                continue

            record = TransactionRecord(
                id=str(uuid.uuid4()),
                date=candidate.date,
                card=candidate.card,
                amount=candidate.amount,
                currency=candidate.currency.upper(),
                description=candidate.description,
                category=category,
                comment=candidate.comment,
                is_income=candidate.is_income,
                created_at=now,
            )
            if find_potential_duplicates(existing, record):
                record = record.model_copy(update={"is_duplicate": True})
                result.duplicates.append(record)
            result.transactions.append(record)

            if not earliest or record.date < earliest:
                earliest = record.date
            if not latest or record.date > latest:
                latest = record.date

        result.summary = ImportSummary(
            total_rows=rows,
            successful_imports=len(result.transactions),
            duplicates_found=len(result.duplicates),
            errors_count=len(result.errors),
            time_range=ImportTimeRange(earliest=earliest, latest=latest),
        )
        logger.info(
            f"import_reconciled: rows={rows} duplicates={len(result.duplicates)} "
            f"errors={len(result.errors)}"
        )
        return result

    def save(
        self,
        records: Union[ImportResult, Iterable[TransactionRecord]],
        *,
        ignore_duplicates: bool = True,
    ) -> list[TransactionRecord]:
        """Persist reconciled records, skipping flagged duplicates by default.

        Records keep the ids :meth:`reconcile` gave them.
        """

        if isinstance(records, ImportResult):
            records = records.transactions
        saved: list[TransactionRecord] = []
        skipped = 0
        for record in records:
            if ignore_duplicates and record.is_duplicate:
                skipped += 1
                continue
            request = CreateTransactionRequest(
                date=record.date,
                card=record.card,
                amount=record.amount,
                currency=record.currency,
                description=record.description,
                category=record.category,
                comment=record.comment,
                is_income=record.is_income,
            )
            saved.append(
                self.transactions.create(
                    request, is_duplicate=record.is_duplicate, transaction_id=record.id
                )
            )
        logger.info(f"import_saved: saved={len(saved)} skipped_duplicates={skipped}")
        return saved
