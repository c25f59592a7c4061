"""Selection steps applied between listing and parsing."""

from kubestatelogs.controllers.snapshot.selectors.currency import (
    CurrencyTable,
    ReplicaSetCurrencySelector,
)

__all__ = ["CurrencyTable", "ReplicaSetCurrencySelector"]
