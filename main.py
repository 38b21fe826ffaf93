import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from analytics import calculate_analytics
from config import get_settings
from database import SessionLocal
from filter_params import query_params_to_filters
from filters import get_all_cards_for_date_range, get_all_categories_for_date_range
from insights import generate_insights
from periods import get_current_time_period, period_label, resolve_period, visible_periods
from schemas import (
    AnalyticsData,
    CreateTransactionRequest,
    DateRange,
    ImportCandidate,
    ImportResult,
    TransactionFilters,
    TransactionRecord,
    UpdateTransactionRequest,
)
from services import (
    ClearAllFailed,
    ImportService,
    TransactionDeleteFailed,
    TransactionNotFound,
    TransactionService,
)


logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Finance Tracker")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def filters_from_request(request: Request) -> TransactionFilters:
    try:
        persisted = query_params_to_filters(request.query_params)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    include_archived = request.query_params.get("includeArchived", "").lower()
    if include_archived in {"1", "true", "yes"}:
        return persisted.filters.model_copy(update={"include_archived": True})
    return persisted.filters


def date_range_from_request(request: Request) -> Optional[DateRange]:
    start = request.query_params.get("start")
    end = request.query_params.get("end")
    if start and end:
        return DateRange(start=start, end=end)
    return None


@app.get("/api/transactions")
def api_list_transactions(
    request: Request, db: Session = Depends(get_db)
) -> list[TransactionRecord]:
    return TransactionService(db).find_all(filters_from_request(request))


@app.post("/api/transactions", status_code=201)
def api_create_transaction(
    data: CreateTransactionRequest, db: Session = Depends(get_db)
) -> TransactionRecord:
    return TransactionService(db).create(data)


@app.get("/api/transactions/{transaction_id}")
def api_get_transaction(
    transaction_id: str, db: Session = Depends(get_db)
) -> TransactionRecord:
    txn = TransactionService(db).find_by_id(transaction_id)
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@app.patch("/api/transactions/{transaction_id}")
def api_update_transaction(
    transaction_id: str,
    data: UpdateTransactionRequest,
    db: Session = Depends(get_db),
) -> TransactionRecord:
    try:
        return TransactionService(db).update(transaction_id, data)
    except TransactionNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/api/transactions/{transaction_id}/archive")
def api_archive_transaction(
    transaction_id: str, db: Session = Depends(get_db)
) -> TransactionRecord:
    try:
        return TransactionService(db).archive(transaction_id)
    except TransactionNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/api/transactions/{transaction_id}/unarchive")
def api_unarchive_transaction(
    transaction_id: str, db: Session = Depends(get_db)
) -> TransactionRecord:
    try:
        return TransactionService(db).unarchive(transaction_id)
    except TransactionNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.delete("/api/transactions/{transaction_id}", status_code=204)
def api_delete_transaction(transaction_id: str, db: Session = Depends(get_db)):
    try:
        TransactionService(db).delete(transaction_id)
    except TransactionDeleteFailed as exc:
        logger.exception("Delete post-condition failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return Response(status_code=204)


@app.delete("/api/transactions")
def api_clear_transactions(db: Session = Depends(get_db)):
    try:
        removed = TransactionService(db).clear_all()
    except ClearAllFailed as exc:
        logger.exception("Clear post-condition failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"removed": removed}


@app.get("/api/periods")
def api_periods():
    return [
        {"period": period.value, "label": period_label(period)}
        for period in visible_periods()
    ]


@app.get("/api/periods/{period}")
def api_resolve_period(period: str, request: Request):
    try:
        date_range = resolve_period(period, date_range_from_request(request))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Unknown period: {period}") from exc
    return {
        "period": period,
        "label": period_label(period),
        "start": date_range.start,
        "end": date_range.end,
        "matches": get_current_time_period(date_range).value,
    }


@app.get("/api/facets")
def api_facets(request: Request, db: Session = Depends(get_db)):
    date_range = date_range_from_request(request)
    snapshot = TransactionService(db).snapshot()
    return {
        "cards": get_all_cards_for_date_range(snapshot, date_range),
        "categories": get_all_categories_for_date_range(snapshot, date_range),
    }


@app.get("/api/analytics")
def api_analytics(request: Request, db: Session = Depends(get_db)) -> AnalyticsData:
    transactions = TransactionService(db).find_all(filters_from_request(request))
    return calculate_analytics(transactions)


@app.get("/api/insights")
def api_insights(request: Request, db: Session = Depends(get_db)):
    transactions = TransactionService(db).find_all(filters_from_request(request))
    currency = request.query_params.get("currency") or get_settings().default_currency
    data = calculate_analytics(transactions)
    return {"currency": currency, "insights": generate_insights(data, currency)}


@app.post("/api/import/preview")
def api_import_preview(
    candidates: list[ImportCandidate], db: Session = Depends(get_db)
) -> ImportResult:
    return ImportService(db).reconcile(candidates)


@app.post("/api/import/commit")
def api_import_commit(
    candidates: list[ImportCandidate],
    ignore_duplicates: bool = Query(True, alias="ignoreDuplicates"),
    db: Session = Depends(get_db),
):
    service = ImportService(db)
    result = service.reconcile(candidates)
    saved = service.save(result, ignore_duplicates=ignore_duplicates)
    logger.info(
        f"import_committed: saved={len(saved)} duplicates={result.summary.duplicates_found}"
    )
    return {"summary": result.summary, "errors": result.errors, "saved": saved}


@app.post("/api/import/save")
def api_import_save(
    records: list[TransactionRecord],
    ignore_duplicates: bool = Query(True, alias="ignoreDuplicates"),
    db: Session = Depends(get_db),
) -> list[TransactionRecord]:
    """Persist rows exactly as returned by the preview, ids included."""

    return ImportService(db).save(records, ignore_duplicates=ignore_duplicates)


def main():
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    main()
