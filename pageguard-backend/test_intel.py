import json

import pytest

from pageguard.core.content_scanner import ContentHeuristicScanner
from pageguard.core.findings import FindingKind
from pageguard.core.intel import DEFAULT_BRANDS, IntelCatalog, load_intel_catalog
from pageguard.core.resource import parse_resource
from pageguard.core.url_evaluator import URLRiskEvaluator
from pageguard.schemas import PageContent


def test_defaults_without_file(tmp_path):
    catalog = load_intel_catalog(str(tmp_path / 'missing.json'))
    assert catalog == IntelCatalog()
    assert 'evil-phishing.com' in catalog.malicious_hosts
    assert catalog.brands == DEFAULT_BRANDS


def test_file_overrides_only_given_lists(tmp_path):
    intel_file = tmp_path / 'intel_db.json'
    intel_file.write_text(json.dumps({
        'bad_domains': [' Scam.Example ', ''],
        'brands': ['acme'],
    }))

    catalog = load_intel_catalog(str(intel_file))

    assert catalog.malicious_hosts == frozenset({'scam.example'})
    assert catalog.brands == ('acme',)
    assert catalog.phishing_phrases == IntelCatalog().phishing_phrases


def test_bad_json_falls_back_to_defaults(tmp_path):
    intel_file = tmp_path / 'intel_db.json'
    intel_file.write_text('{"bad_domains": [')

    assert load_intel_catalog(str(intel_file)) == IntelCatalog()


def test_matching_lists_are_lower_cased(tmp_path):
    intel_file = tmp_path / 'intel_db.json'
    intel_file.write_text(json.dumps({
        'brands': ['PayPal '],
        'title_indicators': ['Sign In'],
        'phishing_phrases': ['Verify Your Account'],
        'sensitive_params': ['Token'],
    }))

    catalog = load_intel_catalog(str(intel_file))

    assert catalog.brands == ('paypal',)
    assert catalog.title_indicators == ('sign in',)
    assert catalog.phishing_phrases == ('verify your account',)
    # Query parameter matching is case-sensitive
    assert catalog.sensitive_params == ('Token',)

    spoofing = URLRiskEvaluator(catalog).evaluate(parse_resource('https://paypal-login.com'))
    assert [f.kind for f in spoofing] == [FindingKind.POSSIBLE_SPOOFING]

    titles = ContentHeuristicScanner(catalog).scan(PageContent(title_lower='sign in'))
    assert [f.kind for f in titles] == [FindingKind.SUSPICIOUS_TITLE]


@pytest.mark.parametrize('payload', [
    ['evil.example'],
    {'brands': 'paypal'},
    {'bad_domains': ['ok.example', 3]},
    'just a string',
])
def test_malformed_intel_file_falls_back_to_defaults(tmp_path, payload):
    intel_file = tmp_path / 'intel_db.json'
    intel_file.write_text(json.dumps(payload))

    catalog = load_intel_catalog(str(intel_file))

    assert catalog == IntelCatalog()
    assert URLRiskEvaluator(catalog).evaluate(parse_resource('https://example.com')) == []
