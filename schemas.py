from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import DEFAULT_CATEGORY


CategoriesMode = Literal["include", "exclude"]


class TransactionRecord(BaseModel):
    """In-memory snapshot of a stored transaction.

    ``amount`` is always non-negative and expressed in minor currency units;
    the direction of the flow is carried by ``is_income``.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    date: str
    card: str = ""
    amount: int = Field(..., ge=0)
    currency: str
    description: str = ""
    category: str = ""
    comment: Optional[str] = None
    is_income: bool = False
    is_archived: bool = False
    is_duplicate: bool = False
    created_at: str = ""


class CreateTransactionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: str = Field(..., min_length=1, max_length=32)
    card: str = Field(default="", max_length=100)
    amount: int = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)
    description: str = ""
    category: str = Field(default=DEFAULT_CATEGORY, max_length=100)
    comment: Optional[str] = None
    is_income: bool = False


class UpdateTransactionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: Optional[str] = Field(default=None, min_length=1, max_length=32)
    card: Optional[str] = Field(default=None, max_length=100)
    amount: Optional[int] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    comment: Optional[str] = None
    is_income: Optional[bool] = None
    is_archived: Optional[bool] = None


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: str
    end: str


class AmountRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int
    max: int


class TransactionFilters(BaseModel):
    """Sparse filter set; ``None`` means no constraint on that dimension."""

    model_config = ConfigDict(frozen=True)

    date_range: Optional[DateRange] = None
    categories: Optional[list[str]] = None
    categories_mode: Optional[CategoriesMode] = None
    cards: Optional[list[str]] = None
    is_income: Optional[bool] = None
    amount_range: Optional[AmountRange] = None
    search_query: Optional[str] = None
    include_archived: bool = False


class CategoryData(BaseModel):
    category: str
    amount: int
    percentage: float
    count: int
    color: str


class MonthlyTrendData(BaseModel):
    month: str
    income: int
    expenses: int
    net: int


class AnalyticsData(BaseModel):
    total_income: int = 0
    total_expenses: int = 0
    net_income: int = 0
    transaction_count: int = 0
    category_breakdown: list[CategoryData] = Field(default_factory=list)
    income_category_breakdown: list[CategoryData] = Field(default_factory=list)
    expense_category_breakdown: list[CategoryData] = Field(default_factory=list)
    monthly_trends: list[MonthlyTrendData] = Field(default_factory=list)
    top_categories: list[CategoryData] = Field(default_factory=list)
    top_income_categories: list[CategoryData] = Field(default_factory=list)
    top_expense_categories: list[CategoryData] = Field(default_factory=list)


class ImportCandidate(BaseModel):
    """A bank-statement row that has already been parsed and mapped."""

    model_config = ConfigDict(extra="forbid")

    date: str = Field(..., min_length=1, max_length=32)
    card: str = Field(default="", max_length=100)
    amount: int = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)
    description: str = ""
    category: Optional[str] = Field(default=None, max_length=100)
    comment: Optional[str] = None
    is_income: bool = False


class ImportRowError(BaseModel):
    row: int
    column: str
    error: str


class ImportTimeRange(BaseModel):
    earliest: str = ""
    latest: str = ""


class ImportSummary(BaseModel):
    total_rows: int = 0
    successful_imports: int = 0
    duplicates_found: int = 0
    errors_count: int = 0
    time_range: ImportTimeRange = Field(default_factory=ImportTimeRange)


class ImportResult(BaseModel):
    transactions: list[TransactionRecord] = Field(default_factory=list)
    duplicates: list[TransactionRecord] = Field(default_factory=list)
    errors: list[ImportRowError] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)
