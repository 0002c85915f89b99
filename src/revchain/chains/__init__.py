"""Chain ledger — lineage of agents across review iterations.

Public API exports for the chains module.
"""

from revchain.chains.models import Chain, Iteration, IterationStatus
from revchain.chains.processed import ProcessedSet
from revchain.chains.store import (
    ChainConflict,
    ChainNotFound,
    ChainStore,
    ChainStoreError,
    DuplicateChain,
)

__all__ = [
    "Chain",
    "ChainConflict",
    "ChainNotFound",
    "ChainStore",
    "ChainStoreError",
    "DuplicateChain",
    "Iteration",
    "IterationStatus",
    "ProcessedSet",
]
