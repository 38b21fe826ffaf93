"""Query-parameter form of :class:`schemas.TransactionFilters`.

Keys: ``start``, ``end``, ``categories`` and ``cards`` (comma-joined),
``categoriesMode``, ``type`` (``income``/``expense``), ``search``,
``minAmount`` and ``maxAmount`` (integer minor units). The named period is
not stored; it is recovered from ``start``/``end`` on the way back in.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Optional

from periods import TimePeriod, get_current_time_period
from schemas import AmountRange, DateRange, TransactionFilters


FILTER_PARAM_KEYS: tuple[str, ...] = (
    "start",
    "end",
    "categories",
    "categoriesMode",
    "cards",
    "type",
    "search",
    "minAmount",
    "maxAmount",
)


@dataclass(frozen=True)
class PersistedFilters:
    filters: TransactionFilters
    selected_period: Optional[TimePeriod]


def filters_to_query_params(filters: TransactionFilters) -> dict[str, str]:
    params: dict[str, str] = {}
    if filters.date_range and filters.date_range.start and filters.date_range.end:
        params["start"] = filters.date_range.start
        params["end"] = filters.date_range.end
    if filters.categories:
        params["categories"] = ",".join(filters.categories)
    if filters.categories_mode:
        params["categoriesMode"] = filters.categories_mode
    if filters.cards:
        params["cards"] = ",".join(filters.cards)
    if filters.is_income is not None:
        params["type"] = "income" if filters.is_income else "expense"
    if filters.search_query:
        params["search"] = filters.search_query
    if filters.amount_range is not None:
        params["minAmount"] = str(filters.amount_range.min)
        params["maxAmount"] = str(filters.amount_range.max)
    return params


def _split(value: Optional[str]) -> Optional[list[str]]:
    if not value:
        return None
    items = [item for item in value.split(",") if item]
    return items or None


def _parse_amount(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer amount in minor units") from exc


def query_params_to_filters(
    params: Mapping[str, str], *, today: Optional[date] = None
) -> PersistedFilters:
    """Parse query parameters; unknown values for enumerated keys are ignored.

    Raises ``ValueError`` when ``minAmount``/``maxAmount`` are not integers.
    """

    values: dict[str, object] = {}

    start, end = params.get("start"), params.get("end")
    date_range = DateRange(start=start, end=end) if start and end else None
    if date_range is not None:
        values["date_range"] = date_range

    categories = _split(params.get("categories"))
    if categories:
        values["categories"] = categories
    mode = params.get("categoriesMode")
    if mode in ("include", "exclude"):
        values["categories_mode"] = mode
    cards = _split(params.get("cards"))
    if cards:
        values["cards"] = cards

    type_param = params.get("type")
    if type_param == "income":
        values["is_income"] = True
    elif type_param == "expense":
        values["is_income"] = False

    search = params.get("search")
    if search:
        values["search_query"] = search

    min_amount, max_amount = params.get("minAmount"), params.get("maxAmount")
    if min_amount and max_amount:
        values["amount_range"] = AmountRange(
            min=_parse_amount("minAmount", min_amount),
            max=_parse_amount("maxAmount", max_amount),
        )

    selected = (
        get_current_time_period(date_range, today=today) if date_range is not None else None
    )
    return PersistedFilters(filters=TransactionFilters(**values), selected_period=selected)
