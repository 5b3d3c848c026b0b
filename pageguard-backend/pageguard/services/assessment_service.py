import time
import logging
from functools import lru_cache
from typing import AbstractSet, List, Optional, Union

from sqlalchemy.orm import Session

from pageguard.config import settings
from pageguard.core.content_scanner import ContentHeuristicScanner
from pageguard.core.findings import Sensitivity
from pageguard.core.intel import IntelCatalog, load_intel_catalog
from pageguard.core.notification_policy import NotificationPolicy
from pageguard.core.page_extractor import extract_page_content
from pageguard.core.resource import parse_resource
from pageguard.core.url_evaluator import URLRiskEvaluator
from pageguard.core.whitelist import is_trusted
from pageguard.schemas import (
    AssessmentResult,
    PageContent,
    ResourceIdentity,
    SecurityVerdict,
    StatusResponse,
)
from pageguard.services.history_store import HistoryStore
from pageguard.services.whitelist_store import WhitelistStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_intel_catalog() -> IntelCatalog:
    return load_intel_catalog(settings.INTEL_DB_PATH)


class AssessmentService:
    def __init__(self, db: Session,
                 catalog: Optional[IntelCatalog] = None,
                 history_capacity: Optional[int] = None,
                 sensitivity: Optional[Union[Sensitivity, str]] = None,
                 enable_phishing_detection: Optional[bool] = None,
                 enable_malware_detection: Optional[bool] = None):
        self.db = db
        self.catalog = catalog or get_intel_catalog()

        self.enable_phishing_detection = (
            settings.ENABLE_PHISHING_DETECTION if enable_phishing_detection is None
            else enable_phishing_detection
        )
        self.enable_malware_detection = (
            settings.ENABLE_MALWARE_DETECTION if enable_malware_detection is None
            else enable_malware_detection
        )
        self.default_sensitivity = Sensitivity(sensitivity or settings.NOTIFICATION_SENSITIVITY)

        self.url_evaluator = URLRiskEvaluator(
            self.catalog,
            check_malicious=self.enable_malware_detection,
            check_spoofing=self.enable_phishing_detection,
        )
        self.content_scanner = ContentHeuristicScanner(self.catalog)
        self.policy = NotificationPolicy()

        self.history = HistoryStore(db, capacity=history_capacity)
        self.whitelist = WhitelistStore(db)

    def evaluate(self, resource: ResourceIdentity,
                 content: Optional[PageContent] = None,
                 whitelist: AbstractSet[str] = frozenset()) -> SecurityVerdict:
        """
        Pure evaluation of one resource; nothing is recorded

        Args:
            resource: Parsed resource identity
            content: Extracted page signals; None skips the content scanner
            whitelist: Trusted hosts snapshot

        Returns:
            SecurityVerdict for the resource
        """
        if is_trusted(resource.host, whitelist):
            logger.info(f"Trusted host {resource.host}, skipping evaluation")
            return SecurityVerdict.trusted(resource.url, resource.host)

        findings = self.url_evaluator.evaluate(resource)
        if content is not None and self.enable_phishing_detection:
            findings.extend(self.content_scanner.scan(content))

        return SecurityVerdict.from_findings(resource.url, resource.host, findings)

    def assess(self, url: Optional[str],
               content: Optional[PageContent] = None,
               html: Optional[str] = None,
               sensitivity: Optional[Union[Sensitivity, str]] = None) -> AssessmentResult:
        """
        Complete assessment: whitelist gate, evaluators, history write, notification decision

        Raises:
            NoActiveResource: url is empty
            InvalidResourceIdentity: url cannot be analyzed; nothing is recorded
        """
        start_time = time.time()

        resource = parse_resource(url)

        if content is None and html is not None:
            content = extract_page_content(html)

        whitelist = self.whitelist.hosts()
        verdict = self.evaluate(resource, content, whitelist)
        self.history.record(verdict)

        decision = self.policy.decide(verdict, sensitivity or self.default_sensitivity)

        processing_time = time.time() - start_time
        logger.info(
            f"✓ Assessed {resource.host} in {processing_time:.3f}s - "
            f"score={verdict.safety_score} level={verdict.risk_level.name} notify={decision.notify}"
        )

        return AssessmentResult(
            verdict=verdict,
            decision=decision,
            trusted=is_trusted(resource.host, whitelist),
        )

    def get_status(self, url: Optional[str]) -> StatusResponse:
        """Stored verdict for url, or the SAFE default when it was never assessed"""
        resource = parse_resource(url)

        trusted = self.whitelist.contains(resource.host)
        stored = self.history.get(resource.url)

        if trusted:
            verdict = SecurityVerdict.trusted(resource.url, resource.host)
        else:
            verdict = stored or SecurityVerdict.default_for(resource.url, resource.host)

        return StatusResponse(
            verdict=verdict,
            trusted=trusted,
            recorded=stored is not None,
            indicator=self.policy.indicator_for(verdict.risk_level),
            summary=self.policy.summarize_status(verdict, trusted=trusted),
            form_guard=self.policy.form_guard(verdict.safety_score),
        )

    def recent_verdicts(self, limit: int = 50) -> List[SecurityVerdict]:
        return self.history.entries(limit=limit)
