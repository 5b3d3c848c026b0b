import json
import logging
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


DEFAULT_MALICIOUS_HOSTS = (
    'evil-phishing.com',
    'fake-bank-login.net',
    'free-prizes-scam.org',
    'login-paypal-secure-verification.com',
)

# Priority order matters: the first matching brand wins
DEFAULT_BRANDS = (
    'paypal', 'apple', 'amazon', 'microsoft', 'netflix', 'google',
    'facebook', 'instagram', 'twitter', 'linkedin', 'banque',
)

DEFAULT_PHISHING_PHRASES = (
    'verify your account',
    'confirm your identity',
    'suspicious activity',
    'update your payment',
    'your account has been limited',
    'login to continue',
    'secure login',
    'please re-enter your password',
)

DEFAULT_TITLE_INDICATORS = ('secure', 'login', 'sign in', 'verify', 'confirm', 'update')

DEFAULT_SENSITIVE_PARAMS = ('password', 'login', 'account')
DEFAULT_REDIRECT_PARAMS = ('redirect', 'return_to', 'goto')


class IntelCatalog(BaseModel):
    """
    Static detection data handed to the evaluators at construction.

    Nothing here is learned or fetched; tests substitute their own catalog.
    """
    malicious_hosts: FrozenSet[str] = frozenset(DEFAULT_MALICIOUS_HOSTS)
    brands: Tuple[str, ...] = DEFAULT_BRANDS
    phishing_phrases: Tuple[str, ...] = DEFAULT_PHISHING_PHRASES
    title_indicators: Tuple[str, ...] = DEFAULT_TITLE_INDICATORS
    sensitive_params: Tuple[str, ...] = DEFAULT_SENSITIVE_PARAMS
    redirect_params: Tuple[str, ...] = DEFAULT_REDIRECT_PARAMS

    class Config:
        frozen = True


# Keys accepted in an intel file -> catalog field
_FILE_KEYS = {
    'bad_domains': 'malicious_hosts',
    'brands': 'brands',
    'phishing_phrases': 'phishing_phrases',
    'title_indicators': 'title_indicators',
    'sensitive_params': 'sensitive_params',
    'redirect_params': 'redirect_params',
}

_CASE_SENSITIVE_FIELDS = ('sensitive_params', 'redirect_params')


def _candidate_paths(explicit_path: Optional[str]):
    if explicit_path:
        return [Path(explicit_path)]
    return [
        Path(__file__).resolve().parents[2] / 'data' / 'intel_db.json',
        Path.cwd() / 'data' / 'intel_db.json',
    ]


def _parse_overrides(data) -> dict:
    """
    Map intel file keys onto catalog fields.

    Matching runs against lower-cased hosts, titles and body text, so those
    lists are normalized here. Query parameter tokens are kept as given.

    Raises:
        TypeError: the file is not an object of string lists
    """
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")

    overrides = {}
    for file_key, field_name in _FILE_KEYS.items():
        values = data.get(file_key)
        if values is None:
            continue
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise TypeError(f"'{file_key}' must be a list of strings")

        if field_name in _CASE_SENSITIVE_FIELDS:
            overrides[field_name] = tuple(values)
            continue

        normalized = [v.strip().lower() for v in values if v.strip()]
        if field_name == 'malicious_hosts':
            overrides[field_name] = frozenset(normalized)
        else:
            overrides[field_name] = tuple(normalized)

    return overrides


def load_intel_catalog(path: Optional[str] = None) -> IntelCatalog:
    """
    Load the intel catalog, letting an optional JSON file override defaults

    Args:
        path: Explicit intel file; when omitted the usual data/ locations are tried

    Returns:
        IntelCatalog built from the first file found, or the built-in lists
    """
    for file_path in _candidate_paths(path):
        if not file_path.exists():
            continue
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"❌ JSON decode error in intel file {file_path}: {e}")
            return IntelCatalog()
        except IOError as e:
            logger.error(f"❌ IO error loading intel file {file_path}: {e}")
            return IntelCatalog()

        try:
            overrides = _parse_overrides(data)
            catalog = IntelCatalog(**overrides)
        except (TypeError, ValidationError) as e:
            logger.error(f"❌ Invalid intel file {file_path}: {e}")
            return IntelCatalog()

        logger.info(f"✓ Loaded intel catalog from: {file_path} ({', '.join(sorted(overrides)) or 'no overrides'})")
        return catalog

    if path:
        logger.warning(f"⚠️ Intel file {path} not found, using built-in lists")
    return IntelCatalog()
