"""List item mutation and reconciliation.

The engine submits edits for remote validation only when needed and folds
per-field outcomes back into the item, status and selection stores.
"""

from itemsync.mutation.engine import MutationEngine
from itemsync.mutation.factory import create_mutation_engine
from itemsync.mutation.locks import KeyedLocks
from itemsync.mutation.payload import (
    DefaultFieldValueResolver,
    FieldValueResolver,
    RequestPlan,
    decide_request,
)
from itemsync.mutation.reconciliation import (
    FieldEdit,
    LocalEdit,
    ReconcileEntry,
    Reconciler,
    ReconcileSummary,
)

__all__ = [
    "MutationEngine",
    "create_mutation_engine",
    "KeyedLocks",
    "DefaultFieldValueResolver",
    "FieldValueResolver",
    "RequestPlan",
    "decide_request",
    "FieldEdit",
    "LocalEdit",
    "ReconcileEntry",
    "Reconciler",
    "ReconcileSummary",
]
