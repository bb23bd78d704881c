"""Conflict-of-interest findings.

Direct findings come from active declared partnerships. Cross-validation
heuristics look at weaker declarations and at evaluation history; each
positive heuristic adds its weight to the 0–100 risk score.

  heuristic                      severity   weight
  ─────────────────────────────  ────────   ──────
  active family declaration      warning      60
  active investor declaration    warning      40
  active other declaration       info         15
  recently ended partnership     warning      30
  repeated evaluations           info         10
  score inflation vs. peers      warning      25
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

from incubation.config import Settings
from incubation.models import (
    BLOCKING_PARTNERSHIP_TYPES,
    ConflictReason,
    ConflictSeverity,
    EvaluationRecord,
    Partnership,
    PartnershipType,
)
from incubation.scoring.utils import mean, to_decimal

DECLARATION_WEIGHTS: dict[PartnershipType, tuple[ConflictSeverity, int]] = {
    PartnershipType.FAMILY: (ConflictSeverity.WARNING, 60),
    PartnershipType.INVESTOR: (ConflictSeverity.WARNING, 40),
    PartnershipType.OTHER: (ConflictSeverity.INFO, 15),
}
RECENT_PARTNERSHIP_WEIGHT = 30
REPEAT_EVALUATION_WEIGHT = 10
SCORE_INFLATION_WEIGHT = 25


@dataclass(frozen=True)
class HeuristicPolicy:
    cooling_off_days: int = 365
    repeat_evaluation_threshold: int = 3
    score_inflation_margin: float = 2.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "HeuristicPolicy":
        return cls(
            cooling_off_days=settings.conflict_cooling_off_days,
            repeat_evaluation_threshold=settings.repeat_evaluation_threshold,
            score_inflation_margin=settings.score_inflation_margin,
        )


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def direct_conflicts(partnerships: Iterable[Partnership]) -> List[ConflictReason]:
    """Critical reasons for every active partnership of a blocking type."""
    return [
        ConflictReason(
            type="declared_partnership",
            message=f"Mentor has an active {p.partnership_type.value} relationship with the company",
            severity=ConflictSeverity.CRITICAL,
            weight=100,
            partnership_type=p.partnership_type,
        )
        for p in partnerships
        if p.is_active and p.partnership_type in BLOCKING_PARTNERSHIP_TYPES
    ]


def declared_relationships(partnerships: Iterable[Partnership]) -> List[ConflictReason]:
    reasons = []
    for p in partnerships:
        if not p.is_active or p.partnership_type not in DECLARATION_WEIGHTS:
            continue
        severity, weight = DECLARATION_WEIGHTS[p.partnership_type]
        reasons.append(ConflictReason(
            type="declared_relationship",
            message=f"Mentor declared a {p.partnership_type.value} relationship with the company",
            severity=severity,
            weight=weight,
            partnership_type=p.partnership_type,
        ))
    return reasons


def recent_partnerships(
    partnerships: Iterable[Partnership],
    now: datetime,
    cooling_off_days: int,
) -> List[ConflictReason]:
    """Blocking-type partnerships that ended inside the cooling-off window."""
    cutoff = now - timedelta(days=cooling_off_days)
    reasons = []
    for p in partnerships:
        if p.is_active or p.partnership_type not in BLOCKING_PARTNERSHIP_TYPES:
            continue
        if p.end_date is None or _aware(p.end_date) < cutoff:
            continue
        reasons.append(ConflictReason(
            type="recent_partnership",
            message=(
                f"Mentor's {p.partnership_type.value} relationship with the company "
                f"ended {(now - _aware(p.end_date)).days} days ago"
            ),
            severity=ConflictSeverity.WARNING,
            weight=RECENT_PARTNERSHIP_WEIGHT,
            partnership_type=p.partnership_type,
        ))
    return reasons


def repeated_evaluations(
    mentor_id: str,
    evaluations: Iterable[EvaluationRecord],
    threshold: int,
) -> Optional[ConflictReason]:
    count = sum(1 for e in evaluations if e.mentor_id == mentor_id)
    if count < threshold:
        return None
    return ConflictReason(
        type="repeated_evaluations",
        message=f"Mentor has already evaluated this company {count} times",
        severity=ConflictSeverity.INFO,
        weight=REPEAT_EVALUATION_WEIGHT,
    )


def score_inflation(
    mentor_id: str,
    evaluations: Iterable[EvaluationRecord],
    margin: float,
) -> Optional[ConflictReason]:
    """Mentor's mean score for the company well above the other mentors' mean."""
    own: List[Decimal] = []
    peers: List[Decimal] = []
    for e in evaluations:
        (own if e.mentor_id == mentor_id else peers).append(to_decimal(e.normalized_score()))
    if not own or not peers:
        return None

    gap = mean(own) - mean(peers)
    if gap < to_decimal(margin):
        return None
    return ConflictReason(
        type="score_inflation",
        message=f"Mentor's scores for this company exceed other mentors' by {gap:.1f} points on average",
        severity=ConflictSeverity.WARNING,
        weight=SCORE_INFLATION_WEIGHT,
    )


def cross_validate(
    mentor_id: str,
    partnerships: List[Partnership],
    evaluations: List[EvaluationRecord],
    policy: HeuristicPolicy,
    now: Optional[datetime] = None,
) -> List[ConflictReason]:
    """Run every heuristic; order of the returned reasons is stable."""
    now = now or datetime.now(timezone.utc)
    reasons = declared_relationships(partnerships)
    reasons += recent_partnerships(partnerships, now, policy.cooling_off_days)
    for finding in (
        repeated_evaluations(mentor_id, evaluations, policy.repeat_evaluation_threshold),
        score_inflation(mentor_id, evaluations, policy.score_inflation_margin),
    ):
        if finding is not None:
            reasons.append(finding)
    return reasons
