# backend/nexus/services/override_store.py

from abc import ABC, abstractmethod
from copy import deepcopy
from threading import Lock
from typing import Any, Dict, Optional


class OverrideStore(ABC):
    """
    Interface για την αποθήκη overrides (campaign_run -> μερικό config).
    Ο assembler ξέρει μόνο αυτό, ώστε αργότερα να μπει
    υλοποίηση με βάση χωρίς να αλλάξει τίποτα άλλο.
    """

    @abstractmethod
    def get(self, campaign_run: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def put(self, campaign_run: str, override: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def all(self) -> Dict[str, Dict[str, Any]]:
        ...


class InMemoryOverrideStore(OverrideStore):
    """
    Απλός in-memory πίνακας overrides.
    Δεν ακουμπάει βάση – όλα ζουν στη RAM και χάνονται στο restart.
    Last-write-wins: κάθε put αντικαθιστά ολόκληρο το προηγούμενο override.
    """

    def __init__(self) -> None:
        self._overrides: Dict[str, Dict[str, Any]] = {}
        self._lock = Lock()

    def get(self, campaign_run: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            override = self._overrides.get(campaign_run)
            return deepcopy(override) if override is not None else None

    def put(self, campaign_run: str, override: Dict[str, Any]) -> None:
        with self._lock:
            self._overrides[campaign_run] = deepcopy(override)

    def all(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return deepcopy(self._overrides)


# SINGLETON (ένα store για όλο το backend)
_STORE: InMemoryOverrideStore | None = None


def get_override_store() -> OverrideStore:
    """
    Lazy δημιουργία του store.
    Καλείται από τα endpoints του main.py (μέσω Depends).
    """
    global _STORE
    if _STORE is None:
        _STORE = InMemoryOverrideStore()
    return _STORE
