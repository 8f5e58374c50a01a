# backend/nexus/models/metadata_models.py

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel


class FieldPrecedence(str, Enum):
    """
    Ποιος κερδίζει όταν ένα custom field έχει το ίδιο όνομα
    με ένα canonical πεδίο.
    - CUSTOM_WINS: το custom field επικαλύπτει το canonical (ιστορική συμπεριφορά).
    - CANONICAL_WINS: το canonical μένει, το custom αγνοείται.
    """
    CUSTOM_WINS = "custom_wins"
    CANONICAL_WINS = "canonical_wins"


class NumericFallback(str, Enum):
    """
    Τι γράφουμε σε ένα αριθμητικό πεδίο όταν η τιμή της βάσης
    λείπει ή δεν είναι αριθμός. Ποτέ NaN.
    """
    NULL = "null"
    ZERO = "zero"


class CustomFields(BaseModel):
    """
    Το "ανοιχτό" κομμάτι μιας εγγραφής: ό,τι έχει βάλει ο χρήστης
    στο custom_fields, χωρίς γνωστό σχήμα.
    """
    values: Dict[str, Any] = {}

    def is_enabled(self, name: str) -> bool:
        """True μόνο για ρητό boolean true (όχι "true", όχι 1)."""
        return self.values.get(name) is True
