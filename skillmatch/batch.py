"""
Batch driver: score every offer/resume pair of a batch document.

A bad pair is recorded with its errors and the batch moves on; a broken
ontology is a setup error and propagates to the caller.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

from .errors import InvalidInputError
from .logger import get_logger
from .ontology import SkillGateway
from .schema import BATCH_KEY, OFFER_KEY, RESUME_KEY, pair_id, validate_pair
from .scoring import check_policy, match_skills


@dataclass
class BatchReport:
    results: List[Dict[str, Any]] = field(default_factory=list)
    policy: str = "accumulate"

    @property
    def scored(self) -> int:
        return sum(1 for r in self.results if r["status"] == "ok")

    @property
    def failed(self) -> int:
        return len(self.results) - self.scored

    @property
    def mean_total(self) -> float | None:
        totals = [r["total"] for r in self.results if r["status"] == "ok"]
        if not totals:
            return None
        return sum(totals) / len(totals)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy": self.policy,
            "summary": {
                "pairs": len(self.results),
                "scored": self.scored,
                "failed": self.failed,
                "mean_total": self.mean_total,
            },
            "results": self.results,
        }


def iter_pairs(document: Any) -> Iterator[Tuple[str, Any]]:
    """
    Yield (pair_id, pair) for every entry of a batch document.

    Raises:
        InvalidInputError: if the document itself has no pair list
    """
    if not isinstance(document, dict) or not isinstance(document.get(BATCH_KEY), list):
        raise InvalidInputError(f"Batch document must be an object with a '{BATCH_KEY}' list")
    for position, pair in enumerate(document[BATCH_KEY], start=1):
        yield pair_id(pair, position), pair


def score_pair(pid: str, pair: Any, gateway: SkillGateway, policy: str = "accumulate") -> Dict[str, Any]:
    """Score one pair; returns a result entry with status 'ok' or 'invalid'."""
    logger = get_logger()

    errors = validate_pair(pair)
    if errors:
        logger.record_pair_failure("InvalidPair")
        logger.warning("Skipping invalid pair", id=pid, errors=errors)
        return {"id": pid, "status": "invalid", "errors": errors}

    try:
        result = match_skills(pair[OFFER_KEY], pair[RESUME_KEY], gateway, policy)
    except InvalidInputError as e:
        logger.record_pair_failure(type(e).__name__)
        logger.warning("Could not score pair", id=pid, error=str(e))
        return {"id": pid, "status": "invalid", "errors": [str(e)]}

    logger.record_pair_scored()
    logger.info("Scored pair", id=pid, total=round(result.total, 4))
    return {"id": pid, "status": "ok", **result.to_dict()}


def run_batch(
    document: Any,
    gateway: SkillGateway,
    policy: str = "accumulate",
    workers: int = 1,
) -> BatchReport:
    """
    Score all pairs of a batch document.

    Args:
        document: parsed batch JSON ({"offersAndResumes": [...]})
        gateway: ontology shared read-only by every pair
        policy: related-match scoring policy
        workers: thread count; results keep input order either way

    Raises:
        InvalidInputError: for an unknown policy or a document without pairs
    """
    check_policy(policy)
    if workers < 1:
        raise InvalidInputError("workers must be at least 1")

    pairs = list(iter_pairs(document))
    get_logger().info("Starting batch", pairs=len(pairs), policy=policy, workers=workers)

    if workers == 1 or len(pairs) <= 1:
        results = [score_pair(pid, pair, gateway, policy) for pid, pair in pairs]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda p: score_pair(p[0], p[1], gateway, policy), pairs))

    return BatchReport(results=results, policy=policy)
