# src/xregister/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the exchange service, the use cases built on it and
the periodic sync worker. I/O goes through the store and provider interfaces.
"""

from xregister.application.exchange_service import ExchangeRateService
from xregister.application.use_cases import (
    ListExchangesRequest,
    ListExchangesUseCase,
    SyncExchangeRateUseCase,
)
from xregister.application.sync_worker import CycleReport, SyncWorker, WorkerState, iter_pairs

__all__ = [
    "ExchangeRateService",
    "ListExchangesRequest",
    "ListExchangesUseCase",
    "SyncExchangeRateUseCase",
    "CycleReport",
    "SyncWorker",
    "WorkerState",
    "iter_pairs",
]
