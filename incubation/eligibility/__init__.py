"""Eligibility checker and stage progression."""
from incubation.eligibility.checker import check_eligibility, meets_thresholds
from incubation.eligibility.progression import EligibilityService

__all__ = ["check_eligibility", "meets_thresholds", "EligibilityService"]
