from enum import Enum, IntEnum


class RiskLevel(IntEnum):
    SAFE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class FindingKind(str, Enum):
    # URL findings
    KNOWN_MALICIOUS = "known_malicious"
    INSECURE_CONNECTION = "insecure_connection"
    POSSIBLE_SPOOFING = "possible_spoofing"
    SENSITIVE_PARAMS = "sensitive_params"
    POSSIBLE_REDIRECTION = "possible_redirection"

    # Content findings
    SUSPICIOUS_TEXT = "suspicious_text"
    SUSPICIOUS_TITLE = "suspicious_title"
    META_REFRESH = "meta_refresh"
    HIDDEN_IFRAMES = "hidden_iframes"


class Sensitivity(str, Enum):
    ALL = "all"
    MEDIUM_PLUS = "medium+"
    HIGH_PLUS = "high+"


# Score deductions per finding (0-100 scale)
DEDUCTIONS = {
    'known_malicious': 100,
    'insecure_connection': 30,
    'spoofing_high': 60,
    'spoofing_medium': 30,
    'sensitive_params': 10,
    'possible_redirection': 15,
    # Content findings are advisory only
    'content': 0,
}

# Safety score bands, evaluated from the most severe level down
LEVEL_BANDS = [
    (20, RiskLevel.CRITICAL),
    (40, RiskLevel.HIGH),
    (60, RiskLevel.MEDIUM),
    (80, RiskLevel.LOW),
]

MAX_SCORE = 100
MIN_SCORE = 0


class IndicatorTier(str, Enum):
    NONE = "none"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"
    CRITICAL = "critical"


class NotificationPriority(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class StatusTone(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"
