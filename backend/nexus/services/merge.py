# backend/nexus/services/merge.py

from copy import deepcopy
from typing import Any, Dict

from nexus.config import MERGE_MAX_DEPTH
from nexus.errors import MergeDepthError


def deep_merge(
    base: Dict[str, Any],
    override: Dict[str, Any],
    max_depth: int = MERGE_MAX_DEPTH,
) -> Dict[str, Any]:
    """
    Right-biased deep merge: το override κερδίζει σε κάθε σύγκρουση.

    Κανόνες, για κάθε κλειδί του override:
    - dict πάνω σε dict -> αναδρομικό merge
    - dict χωρίς dict στη βάση -> παίρνουμε αυτούσιο το υποδέντρο του override
    - οτιδήποτε άλλο (scalar, list, None) -> αντικαθιστά την τιμή της βάσης

    Οι λίστες είναι "αδιαφανείς": αντικαθίστανται ολόκληρες, ποτέ concat.
    Κλειδιά που υπάρχουν μόνο στη βάση περνάνε όπως είναι.
    Κανένα από τα inputs δεν αλλάζει, επιστρέφεται νέο dict.
    """
    return _merge(base, override, max_depth, 1)


def _merge(base: Dict[str, Any], override: Dict[str, Any], max_depth: int, depth: int) -> Dict[str, Any]:
    if depth > max_depth:
        raise MergeDepthError(f"Override nesting exceeds the maximum depth of {max_depth}")

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        base_value = result.get(key)

        if isinstance(override_value, dict) and isinstance(base_value, dict):
            result[key] = _merge(base_value, override_value, max_depth, depth + 1)
        else:
            result[key] = deepcopy(override_value)

    return result


def payload_depth(value: Any) -> int:
    """
    Βάθος φωλιάσματος ενός JSON-like αντικειμένου (0 για scalar).
    Iterative, ώστε ένα κακόβουλο payload να μη γεμίσει το stack.
    """
    deepest = 0
    stack = [(value, 0)]
    while stack:
        current, level = stack.pop()
        if isinstance(current, dict):
            children = current.values()
        elif isinstance(current, list):
            children = current
        else:
            deepest = max(deepest, level)
            continue
        deepest = max(deepest, level + 1)
        for child in children:
            stack.append((child, level + 1))
    return deepest
