"""Conflict-of-interest policy: gate, heuristics and partnership management."""
from incubation.policy.conflict_gate import ConflictPolicyGate, RECOMMENDATIONS
from incubation.policy.heuristics import HeuristicPolicy, cross_validate, direct_conflicts
from incubation.policy.partnerships import PartnershipService

__all__ = [
    "ConflictPolicyGate",
    "RECOMMENDATIONS",
    "HeuristicPolicy",
    "cross_validate",
    "direct_conflicts",
    "PartnershipService",
]
