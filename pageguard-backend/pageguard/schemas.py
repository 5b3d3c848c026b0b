from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Tuple
from datetime import datetime

from pageguard.core.findings import (
    FindingKind,
    IndicatorTier,
    NotificationPriority,
    RiskLevel,
    Sensitivity,
    Severity,
    StatusTone,
)
from pageguard.core.risk_scorer import aggregate, clamp_score, level_for_score

# ==========================================
# 🧱 SHARED MODELS
# ==========================================

class Finding(BaseModel):
    """A single detected risk signal"""
    kind: FindingKind
    severity: Severity
    description: str
    deduction: int = Field(default=0, ge=0)

    # Matched phrase/token for content findings
    evidence: Optional[str] = None

    class Config:
        frozen = True


class ResourceIdentity(BaseModel):
    """Decomposed URL of the resource being evaluated"""
    url: str
    scheme: str
    host: str
    path: str = ""
    query: str = ""

    class Config:
        frozen = True


class PageContent(BaseModel):
    """Signals extracted from the rendered document by the host"""
    body_text_lower: str = ""
    title_lower: str = ""
    has_meta_refresh: bool = False
    hidden_frame_count: int = Field(default=0, ge=0)


class SecurityVerdict(BaseModel):
    """
    Outcome of one evaluation.

    safety_score and risk_level are always derived from findings; build
    verdicts with from_findings(), trusted() or default_for().
    """
    resource_id: str
    host: str
    findings: Tuple[Finding, ...] = ()
    safety_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    evaluated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_consistency(self):
        expected_score = clamp_score(100 - sum(f.deduction for f in self.findings))
        if self.safety_score != expected_score:
            raise ValueError(
                f"safety_score {self.safety_score} does not match findings (expected {expected_score})"
            )
        if self.risk_level != level_for_score(self.safety_score):
            raise ValueError(
                f"risk_level {self.risk_level.name} does not match safety_score {self.safety_score}"
            )
        return self

    @classmethod
    def from_findings(cls, resource_id: str, host: str, findings: List[Finding],
                      evaluated_at: Optional[datetime] = None) -> 'SecurityVerdict':
        score, level = aggregate(findings)
        return cls(
            resource_id=resource_id,
            host=host,
            findings=tuple(findings),
            safety_score=score,
            risk_level=level,
            evaluated_at=evaluated_at or datetime.utcnow(),
        )

    @classmethod
    def trusted(cls, resource_id: str, host: str) -> 'SecurityVerdict':
        """Verdict for a whitelisted host: SAFE, score 100, no findings"""
        return cls.from_findings(resource_id, host, [])

    @classmethod
    def default_for(cls, resource_id: str, host: str) -> 'SecurityVerdict':
        """Verdict used when the history has nothing for resource_id"""
        return cls.from_findings(resource_id, host, [])

# ==========================================
# 📤 POLICY MODELS
# ==========================================

class Indicator(BaseModel):
    """Passive badge data; rendering is left to the UI"""
    tier: IndicatorTier
    glyph_count: int
    badge_text: str
    color: str


class NotificationDecision(BaseModel):
    notify: bool
    priority: NotificationPriority
    sensitivity: Sensitivity
    indicator: Indicator
    title: str
    message: str
    details: List[str] = []


class StatusSummary(BaseModel):
    tone: StatusTone
    title: str
    message: str
    show_findings: bool = False


class FormGuard(BaseModel):
    confirm_before_submit: bool
    flag_login_forms: bool


class AssessmentResult(BaseModel):
    verdict: SecurityVerdict
    decision: NotificationDecision
    trusted: bool = False

# ==========================================
# 📥 INPUT MODELS
# ==========================================

class AssessmentRequest(BaseModel):
    url: Optional[str] = None
    content: Optional[PageContent] = None
    html: Optional[str] = None
    sensitivity: Optional[Sensitivity] = None


class WhitelistRequest(BaseModel):
    host: str = Field(min_length=1)


class StatusResponse(BaseModel):
    verdict: SecurityVerdict
    trusted: bool
    recorded: bool
    indicator: Indicator
    summary: StatusSummary
    form_guard: FormGuard
