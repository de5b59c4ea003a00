"""Scenarios for exercising the listing map end to end."""

from estate_map.scenarios.crowd_review import CrowdReviewScenario, CrowdReviewSummary

__all__ = ["CrowdReviewScenario", "CrowdReviewSummary"]
