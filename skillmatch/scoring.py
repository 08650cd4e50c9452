"""
Skill matching scores.

Responsibilities:
- Score one required skill against a candidate's skills (1.0 exact,
  partial credit via direct super/sub-classes in the ontology).
- Aggregate per-skill scores into a single total in [0.0, 1.0].
- Return a structured breakdown for every required skill.

Non-Responsibilities:
- No file or network access; the ontology is passed in.
- No printing; see report.py.

Scoring policies for related (non-exact) matches:
- "accumulate" (default): a matching super-class sets the score to 0.5,
  each matching sub-class adds 0.5, then the score is capped at 1.0.
- "symmetric": super- and sub-class matches both set the score to 0.5.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from .errors import InvalidInputError
from .logger import get_logger
from .normalize import normalize_skills
from .ontology import SkillGateway

EXACT_SCORE = 1.0
RELATED_SCORE = 0.5
MAX_SCORE = 1.0

POLICIES = ("accumulate", "symmetric")


@dataclass(frozen=True)
class SkillMatch:
    """Outcome for one required skill."""

    skill: str
    score: float
    kind: str  # exact, super, sub, super+sub, none
    super_classes: List[str] = field(default_factory=list)
    sub_classes: List[str] = field(default_factory=list)
    matched_related: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "skill": self.skill,
            "score": self.score,
            "kind": self.kind,
            "super_classes": list(self.super_classes),
            "sub_classes": list(self.sub_classes),
            "matched_related": list(self.matched_related),
        }


@dataclass(frozen=True)
class MatchResult:
    """Scores for one offer/candidate pair, in offer order."""

    offer_skills: List[str]
    resume_skills: List[str]
    details: List[SkillMatch]
    total: float

    @property
    def scores(self) -> List[float]:
        return [d.score for d in self.details]

    @property
    def unmatched(self) -> List[str]:
        return [d.skill for d in self.details if d.kind != "exact"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offer_skills": list(self.offer_skills),
            "resume_skills": list(self.resume_skills),
            "scores": self.scores,
            "total": self.total,
            "details": [d.to_dict() for d in self.details],
        }


def check_policy(policy: str) -> None:
    if policy not in POLICIES:
        raise InvalidInputError(
            f"Unknown scoring policy '{policy}'. Use one of: {', '.join(POLICIES)}"
        )


def resolve_skill(
    required: str,
    candidate_skills: Sequence[str],
    gateway: SkillGateway,
    policy: str = "accumulate",
) -> SkillMatch:
    """
    Score one normalized required skill against normalized candidate skills.

    The gateway is only consulted when there is no exact match.
    """
    check_policy(policy)
    logger = get_logger()

    if required in candidate_skills:
        logger.record_skill_score("exact")
        return SkillMatch(skill=required, score=EXACT_SCORE, kind="exact")

    logger.record_ontology_lookup()
    super_classes = sorted(gateway.super_classes_of(required))
    sub_classes = sorted(gateway.sub_classes_of(required))
    candidates = set(candidate_skills)

    secondary = 0.0
    matched_super = [s for s in super_classes if s in candidates]
    if matched_super:
        secondary = RELATED_SCORE

    matched_sub = [s for s in sub_classes if s in candidates]
    for _ in matched_sub:
        if policy == "accumulate":
            secondary += RELATED_SCORE
        else:
            secondary = RELATED_SCORE

    secondary = min(secondary, MAX_SCORE)

    kinds = [k for k, hit in (("super", matched_super), ("sub", matched_sub)) if hit]
    kind = "+".join(kinds) or "none"
    logger.record_skill_score(kind)
    logger.debug(
        "Skill not found in resume",
        skill=required,
        super_classes=super_classes,
        sub_classes=sub_classes,
        score=secondary,
    )
    return SkillMatch(
        skill=required,
        score=secondary,
        kind=kind,
        super_classes=super_classes,
        sub_classes=sub_classes,
        matched_related=matched_super + matched_sub,
    )


def score_skill(
    required: str,
    candidate_skills: Sequence[str],
    gateway: SkillGateway,
    policy: str = "accumulate",
) -> float:
    """Return the per-skill score: 0.0, 0.5 or 1.0."""
    return resolve_skill(required, candidate_skills, gateway, policy).score


def aggregate_scores(scores: Sequence[float]) -> float:
    """
    Combine per-skill scores into a total in [0.0, 1.0].

    Each required skill weighs 1/n, so matching every skill exactly gives 1.0.

    Raises:
        InvalidInputError: if there are no scores
    """
    n = len(scores)
    if n == 0:
        raise InvalidInputError("Cannot aggregate an empty list of skill scores")

    weight = 1.0 / n
    total = 0.0
    for s in scores:
        total += s * weight
    # Float summation can land a hair above 1.0
    return min(total, MAX_SCORE)


def match_skills(
    offer_tokens: Sequence[Any],
    resume_tokens: Sequence[Any],
    gateway: SkillGateway,
    policy: str = "accumulate",
) -> MatchResult:
    """
    Normalize both skill lists and score every offer skill.

    Raises:
        InvalidInputError: for malformed skill lists, an empty offer or an unknown policy
    """
    check_policy(policy)
    offer = normalize_skills(offer_tokens)
    resume = normalize_skills(resume_tokens)
    if not offer:
        raise InvalidInputError("Offer has no required skills")

    details = [resolve_skill(skill, resume, gateway, policy) for skill in offer]
    total = aggregate_scores([d.score for d in details])
    get_logger().debug("Pair scored", offer=offer, resume=resume, total=total)
    return MatchResult(offer_skills=offer, resume_skills=resume, details=details, total=total)
