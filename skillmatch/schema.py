from typing import Any, Dict, List

BATCH_KEY = "offersAndResumes"
OFFER_KEY = "offerSkills"
RESUME_KEY = "resumeSkills"


def _is_str_list(v: Any) -> bool:
    return isinstance(v, list) and all(isinstance(x, str) for x in v)


def validate_pair(data: Any) -> List[str]:
    """
    Returns a list of validation error messages for one offer/resume pair.
    Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Pair must be a JSON object"]

    errors: List[str] = []
    for f in (OFFER_KEY, RESUME_KEY):
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_str_list(data[f]):
            errors.append(f"Field '{f}' must be a list of strings")

    if OFFER_KEY in data and isinstance(data[OFFER_KEY], list) and not data[OFFER_KEY]:
        errors.append(f"Field '{OFFER_KEY}' must contain at least one skill")

    if "id" in data and not isinstance(data["id"], str):
        errors.append("Field 'id' must be a string if provided")

    return errors


def validate_batch(document: Any) -> List[str]:
    """
    Validate a whole batch document, prefixing pair errors with their position.
    """
    if not isinstance(document, dict):
        return ["Batch document must be a JSON object"]
    if BATCH_KEY not in document:
        return [f"Missing required field: {BATCH_KEY}"]
    pairs = document[BATCH_KEY]
    if not isinstance(pairs, list):
        return [f"Field '{BATCH_KEY}' must be a list"]

    errors: List[str] = []
    for i, pair in enumerate(pairs, start=1):
        errors.extend(f"pair {i}: {e}" for e in validate_pair(pair))
    return errors


def pair_id(data: Dict[str, Any], position: int) -> str:
    """Stable identifier for reports: explicit 'id' or 'pair-<position>'."""
    value = data.get("id") if isinstance(data, dict) else None
    return value if isinstance(value, str) and value.strip() else f"pair-{position}"
