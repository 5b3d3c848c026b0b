from typing import List, Optional, Sequence
import logging

from pageguard.core.findings import DEDUCTIONS, FindingKind, RiskLevel, Severity
from pageguard.core.intel import DEFAULT_BRANDS, IntelCatalog
from pageguard.schemas import Finding, ResourceIdentity

logger = logging.getLogger(__name__)

SECURE_SCHEME = 'https'


def spoof_score(host: str, brands: Sequence[str] = DEFAULT_BRANDS) -> RiskLevel:
    """
    Lexical brand-impersonation check.

    A host is a candidate for a brand when it contains the brand token but
    does not start with "brand." (the brand's own domain). The first
    candidate decides: hyphen-adjacent, dot-bounded or glued to "secure"
    means HIGH, anything else MEDIUM. No candidate means SAFE.
    """
    for brand in brands:
        if brand not in host or host.startswith(brand + '.'):
            continue

        high_probability_patterns = (
            '-' + brand,
            brand + '-',
            '.' + brand + '.',
            brand + 'secure',
            'secure' + brand,
        )
        if any(pattern in host for pattern in high_probability_patterns):
            return RiskLevel.HIGH
        return RiskLevel.MEDIUM

    return RiskLevel.SAFE


class URLRiskEvaluator:
    """
    Produces findings from the URL alone: static host lists, transport,
    brand spoofing and query parameters. Pure; each check is independent
    and emits at most one finding.
    """

    def __init__(self, catalog: Optional[IntelCatalog] = None,
                 check_malicious: bool = True,
                 check_spoofing: bool = True):
        self.catalog = catalog or IntelCatalog()
        self.check_malicious = check_malicious
        self.check_spoofing = check_spoofing

    def evaluate(self, resource: ResourceIdentity) -> List[Finding]:
        findings = []

        if self.check_malicious:
            finding = self._check_known_malicious(resource.host)
            if finding:
                findings.append(finding)

        finding = self._check_transport(resource.scheme)
        if finding:
            findings.append(finding)

        if self.check_spoofing:
            finding = self._check_brand_spoofing(resource.host)
            if finding:
                findings.append(finding)

        for check in (self._check_sensitive_params, self._check_redirect_params):
            finding = check(resource.query)
            if finding:
                findings.append(finding)

        logger.debug(f"URL checks for {resource.host}: {[f.kind.value for f in findings]}")
        return findings

    def _check_known_malicious(self, host: str) -> Optional[Finding]:
        if host not in self.catalog.malicious_hosts:
            return None
        return Finding(
            kind=FindingKind.KNOWN_MALICIOUS,
            severity=Severity.CRITICAL,
            description="Domain identified as malicious in the known-threat list",
            deduction=DEDUCTIONS['known_malicious'],
        )

    def _check_transport(self, scheme: str) -> Optional[Finding]:
        if scheme == SECURE_SCHEME:
            return None
        return Finding(
            kind=FindingKind.INSECURE_CONNECTION,
            severity=Severity.MEDIUM,
            description="Insecure connection (HTTP instead of HTTPS)",
            deduction=DEDUCTIONS['insecure_connection'],
        )

    def _check_brand_spoofing(self, host: str) -> Optional[Finding]:
        level = spoof_score(host, self.catalog.brands)
        if level == RiskLevel.HIGH:
            return Finding(
                kind=FindingKind.POSSIBLE_SPOOFING,
                severity=Severity.HIGH,
                description="This domain is very likely impersonating a well-known brand",
                deduction=DEDUCTIONS['spoofing_high'],
            )
        if level == RiskLevel.MEDIUM:
            return Finding(
                kind=FindingKind.POSSIBLE_SPOOFING,
                severity=Severity.MEDIUM,
                description="This domain may be impersonating a well-known brand",
                deduction=DEDUCTIONS['spoofing_medium'],
            )
        return None

    def _check_sensitive_params(self, query: str) -> Optional[Finding]:
        # Case-sensitive on purpose
        if not any(token in query for token in self.catalog.sensitive_params):
            return None
        return Finding(
            kind=FindingKind.SENSITIVE_PARAMS,
            severity=Severity.LOW,
            description="Sensitive information may be transmitted in the URL",
            deduction=DEDUCTIONS['sensitive_params'],
        )

    def _check_redirect_params(self, query: str) -> Optional[Finding]:
        if not any(token in query for token in self.catalog.redirect_params):
            return None
        return Finding(
            kind=FindingKind.POSSIBLE_REDIRECTION,
            severity=Severity.LOW,
            description="This page may redirect to a malicious site",
            deduction=DEDUCTIONS['possible_redirection'],
        )
