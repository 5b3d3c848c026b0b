from typing import Iterable, Tuple
import logging

from pageguard.core.findings import LEVEL_BANDS, MAX_SCORE, MIN_SCORE, RiskLevel

logger = logging.getLogger(__name__)


class RiskScorer:
    """
    Folds findings from the URL evaluator and the content scanner into a
    single safety score and a discrete risk level.

    The score starts at 100 and every finding subtracts its deduction; the
    result is clamped to [0, 100]. The level is always derived from the
    clamped score, never from the findings themselves.
    """

    def __init__(self, bands=None):
        # Ordered from the most severe level down, first match wins
        self.bands = list(bands or LEVEL_BANDS)

    def calculate_score(self, findings: Iterable) -> int:
        total_deduction = sum(f.deduction for f in findings)
        return clamp_score(MAX_SCORE - total_deduction)

    def determine_level(self, score: int) -> RiskLevel:
        for upper_bound, level in self.bands:
            if score < upper_bound:
                return level
        return RiskLevel.SAFE

    def aggregate(self, findings: Iterable) -> Tuple[int, RiskLevel]:
        """
        Calculate (score, level) for a finding set

        Args:
            findings: Sequence of findings exposing a ``deduction`` attribute

        Returns:
            Tuple of clamped safety score and banded risk level
        """
        findings = list(findings)
        score = self.calculate_score(findings)
        level = self.determine_level(score)
        logger.debug(f"Aggregated {len(findings)} findings -> score={score}, level={level.name}")
        return score, level


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, int(score)))


_default_scorer = RiskScorer()


def level_for_score(score: int) -> RiskLevel:
    """Banding used everywhere a level is needed from a score"""
    return _default_scorer.determine_level(score)


def aggregate(findings: Iterable) -> Tuple[int, RiskLevel]:
    return _default_scorer.aggregate(findings)
