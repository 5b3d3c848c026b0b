from typing import List, Optional
import logging

from pageguard.core.findings import DEDUCTIONS, FindingKind, Severity
from pageguard.core.intel import IntelCatalog
from pageguard.schemas import Finding, PageContent

logger = logging.getLogger(__name__)


class ContentHeuristicScanner:
    """
    Keyword and structure checks over text already extracted from the page.

    Findings are advisory evidence for the user: they carry no score
    deduction, so only URL findings move the safety score.
    """

    def __init__(self, catalog: Optional[IntelCatalog] = None):
        self.catalog = catalog or IntelCatalog()

    def scan(self, content: PageContent) -> List[Finding]:
        findings = []
        body = content.body_text_lower
        title = content.title_lower

        for phrase in self.catalog.phishing_phrases:
            if phrase.lower() in body:
                findings.append(Finding(
                    kind=FindingKind.SUSPICIOUS_TEXT,
                    severity=Severity.LOW,
                    description=f'Suspicious text detected: "{phrase}"',
                    deduction=DEDUCTIONS['content'],
                    evidence=phrase,
                ))

        for token in self.catalog.title_indicators:
            if token in title:
                findings.append(Finding(
                    kind=FindingKind.SUSPICIOUS_TITLE,
                    severity=Severity.LOW,
                    description=f'Suspicious title: contains "{token}"',
                    deduction=DEDUCTIONS['content'],
                    evidence=token,
                ))

        if content.has_meta_refresh:
            findings.append(Finding(
                kind=FindingKind.META_REFRESH,
                severity=Severity.MEDIUM,
                description="Automatic redirect via meta refresh detected",
                deduction=DEDUCTIONS['content'],
            ))

        if content.hidden_frame_count > 0:
            findings.append(Finding(
                kind=FindingKind.HIDDEN_IFRAMES,
                severity=Severity.MEDIUM,
                description=(
                    f"{content.hidden_frame_count} hidden iframe(s) detected, "
                    "possible clickjacking attempt"
                ),
                deduction=DEDUCTIONS['content'],
                evidence=str(content.hidden_frame_count),
            ))

        if findings:
            logger.debug(f"Content scan raised {len(findings)} indicator(s)")
        return findings
