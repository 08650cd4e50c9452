from typing import Any, List, Sequence

from .errors import InvalidInputError

QUOTE_CHARS = "\"'"


def normalize_skill(token: Any) -> str:
    if not isinstance(token, str):
        raise InvalidInputError(
            f"Skill tokens must be strings, got {type(token).__name__}: {token!r}"
        )
    # Only enclosing quotes: "o'caml" keeps its apostrophe
    return token.strip().strip(QUOTE_CHARS).strip().lower()


def normalize_skills(tokens: Sequence[Any]) -> List[str]:
    """
    Normalize a raw skill list, preserving order.

    Duplicates and empty strings are passed through untouched; only
    non-string entries are rejected.
    """
    if isinstance(tokens, (str, bytes)) or not isinstance(tokens, (list, tuple)):
        raise InvalidInputError(
            f"Skill list must be a list of strings, got {type(tokens).__name__}"
        )
    return [normalize_skill(t) for t in tokens]


def local_name(iri: str) -> str:
    # Fragment wins over path: ".../ontology#Java" -> "Java"
    if "#" in iri:
        return iri.rsplit("#", 1)[1]
    return iri.rstrip("/").rsplit("/", 1)[-1]


def parse_skill_csv(value: str | None) -> List[str]:
    """Split a comma-separated CLI value into raw skill tokens."""
    if not value:
        return []
    return [s.strip() for s in value.split(",") if s.strip()]
