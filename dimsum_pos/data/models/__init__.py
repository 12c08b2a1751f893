from .catalog import (
    ALL_CATEGORIES,
    Catalog,
    MenuItem,
    MenuVariant,
)
from .session import Branch, SessionContext
from .transactions import (
    CartLine,
    TransactionLine,
    PaymentMethod,
    StoredTransaction,
    TransactionRecord,
)
from .data_filters import TransactionFilters
from .reports import (
    DailyRevenue,
    ReportingWindow,
    ReportSummary,
    TopItem,
)

__all__ = [
    # Catalog
    "ALL_CATEGORIES",
    "Catalog",
    "MenuItem",
    "MenuVariant",
    # Session
    "Branch",
    "SessionContext",
    # Transactions
    "CartLine",
    "TransactionLine",
    "PaymentMethod",
    "StoredTransaction",
    "TransactionRecord",
    # Filter classes
    "TransactionFilters",
    # Report models
    "DailyRevenue",
    "ReportingWindow",
    "ReportSummary",
    "TopItem",
]
