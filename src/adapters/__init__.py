"""Read-model and mutation-gateway adapters."""

from .io.csv_repository import CSVLoadingRepository, DataRepository
from .memory import InMemoryLoadingStore, LoadingMutationGateway

__all__ = [
    "CSVLoadingRepository",
    "DataRepository",
    "InMemoryLoadingStore",
    "LoadingMutationGateway",
]
