from typing import Union
import logging

from pageguard.core.findings import (
    IndicatorTier,
    NotificationPriority,
    RiskLevel,
    Sensitivity,
    StatusTone,
)
from pageguard.schemas import (
    FormGuard,
    Indicator,
    NotificationDecision,
    SecurityVerdict,
    StatusSummary,
)

logger = logging.getLogger(__name__)


class NotificationPolicy:
    """
    Turns a verdict into what the UI layer should show.

    The obtrusive alert is filtered by the configured sensitivity; the
    passive indicator is always derived from the level.
    """

    # level -> (tier, glyph count, badge color)
    INDICATORS = {
        RiskLevel.SAFE: (IndicatorTier.NONE, 0, '#4CAF50'),
        RiskLevel.LOW: (IndicatorTier.INFO, 1, '#2196F3'),
        RiskLevel.MEDIUM: (IndicatorTier.WARNING, 2, '#FF9800'),
        RiskLevel.HIGH: (IndicatorTier.DANGER, 3, '#F44336'),
        RiskLevel.CRITICAL: (IndicatorTier.CRITICAL, 3, '#B71C1C'),
    }

    PRIORITIES = {
        RiskLevel.SAFE: NotificationPriority.NONE,
        RiskLevel.LOW: NotificationPriority.LOW,
        RiskLevel.MEDIUM: NotificationPriority.MEDIUM,
        RiskLevel.HIGH: NotificationPriority.HIGH,
        RiskLevel.CRITICAL: NotificationPriority.URGENT,
    }

    # Minimum level that still raises an alert
    SENSITIVITY_FLOORS = {
        Sensitivity.ALL: RiskLevel.SAFE,
        Sensitivity.MEDIUM_PLUS: RiskLevel.MEDIUM,
        Sensitivity.HIGH_PLUS: RiskLevel.HIGH,
    }

    # Safety score thresholds used by the status summary and form guard
    STATUS_THRESHOLDS = {
        'safe': 70,
        'warning': 40,
    }
    FORM_GUARD_THRESHOLDS = {
        'confirm_before_submit': 70,
        'flag_login_forms': 50,
    }

    def should_notify(self, level: RiskLevel, sensitivity: Union[Sensitivity, str]) -> bool:
        sensitivity = Sensitivity(sensitivity)
        return RiskLevel(level) >= self.SENSITIVITY_FLOORS[sensitivity]

    def indicator_for(self, level: RiskLevel) -> Indicator:
        tier, glyph_count, color = self.INDICATORS[RiskLevel(level)]
        return Indicator(
            tier=tier,
            glyph_count=glyph_count,
            badge_text='!' * glyph_count,
            color=color,
        )

    def decide(self, verdict: SecurityVerdict, sensitivity: Union[Sensitivity, str]) -> NotificationDecision:
        """
        Build the notification decision for a verdict

        Args:
            verdict: Verdict produced by the assessment
            sensitivity: all | medium+ | high+

        Returns:
            NotificationDecision carrying notify flag, priority and indicator
        """
        sensitivity = Sensitivity(sensitivity)
        notify = self.should_notify(verdict.risk_level, sensitivity)

        if not notify:
            logger.debug(
                f"Alert suppressed for {verdict.host}: {verdict.risk_level.name} below {sensitivity.value}"
            )

        if verdict.findings:
            title, message = "Security alert", f"Risk detected on {verdict.host}"
        else:
            title, message = "Site checked", f"No risk detected on {verdict.host}"

        return NotificationDecision(
            notify=notify,
            priority=self.PRIORITIES[verdict.risk_level],
            sensitivity=sensitivity,
            indicator=self.indicator_for(verdict.risk_level),
            title=title,
            message=message,
            details=[f.description for f in verdict.findings],
        )

    def summarize_status(self, verdict: SecurityVerdict, trusted: bool = False) -> StatusSummary:
        if trusted:
            return StatusSummary(
                tone=StatusTone.SAFE,
                title="Trusted site",
                message="This site is in your whitelist",
            )

        score = verdict.safety_score
        if score >= self.STATUS_THRESHOLDS['safe']:
            return StatusSummary(
                tone=StatusTone.SAFE,
                title="Site appears secure",
                message="No major risk detected on this site.",
            )
        if score >= self.STATUS_THRESHOLDS['warning']:
            return StatusSummary(
                tone=StatusTone.WARNING,
                title="Attention required",
                message="This site shows some potential risks.",
                show_findings=bool(verdict.findings),
            )
        return StatusSummary(
            tone=StatusTone.DANGER,
            title="Potentially dangerous site",
            message="Significant risks were detected on this site.",
            show_findings=bool(verdict.findings),
        )

    def form_guard(self, safety_score: int) -> FormGuard:
        """Credential-form protections the page layer should apply"""
        return FormGuard(
            confirm_before_submit=safety_score < self.FORM_GUARD_THRESHOLDS['confirm_before_submit'],
            flag_login_forms=safety_score < self.FORM_GUARD_THRESHOLDS['flag_login_forms'],
        )
