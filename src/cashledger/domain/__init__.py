"""Domain layer for cashledger application."""

__all__ = [
    "AccountService",
    "CategoryService",
    "LedgerService",
    "CSVImportService",
    "CategoryLearningStore",
    "TransactionClassifier",
    "SuspicionDetector",
]

_SERVICES = {
    "AccountService": "cashledger.domain.account",
    "CategoryService": "cashledger.domain.category",
    "LedgerService": "cashledger.domain.ledger",
    "CSVImportService": "cashledger.domain.csv_import",
    "CategoryLearningStore": "cashledger.domain.learning",
    "TransactionClassifier": "cashledger.domain.classification",
    "SuspicionDetector": "cashledger.domain.suspicion",
}


# Services are imported lazily: the database layer imports domain.entities,
# and the services import the database layer.
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
