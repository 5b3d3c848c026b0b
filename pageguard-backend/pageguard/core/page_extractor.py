import re
import logging

from bs4 import BeautifulSoup

from pageguard.schemas import PageContent

logger = logging.getLogger(__name__)

# Inline-style patterns that hide an iframe from the user
_HIDDEN_STYLE_PATTERNS = [
    re.compile(r'display\s*:\s*none', re.IGNORECASE),
    re.compile(r'visibility\s*:\s*hidden', re.IGNORECASE),
    re.compile(r'opacity\s*:\s*0(?:\.0+)?\s*(?:;|$)', re.IGNORECASE),
]
_DIMENSION_PATTERN = re.compile(r'(?<![-\w])(width|height)\s*:\s*(\d+)', re.IGNORECASE)


def _parse_int(value) -> int:
    match = re.match(r'\s*(\d+)', str(value or ''))
    return int(match.group(1)) if match else -1


def _is_hidden_iframe(iframe) -> bool:
    if iframe.has_attr('hidden'):
        return True

    style = iframe.get('style', '') or ''
    if any(p.search(style) for p in _HIDDEN_STYLE_PATTERNS):
        return True

    # Zero/one-pixel frames, from attributes or inline style
    dims = {'width': _parse_int(iframe.get('width')), 'height': _parse_int(iframe.get('height'))}
    for name, value in _DIMENSION_PATTERN.findall(style):
        dims[name.lower()] = int(value)
    return 0 <= dims['width'] <= 1 and 0 <= dims['height'] <= 1


def extract_page_content(html: str) -> PageContent:
    """
    Build the content scanner's input from raw HTML

    Only inline styles are inspected; stylesheet rules are not resolved.

    Args:
        html: Raw document markup

    Returns:
        PageContent with lower-cased text/title and structural flags
    """
    soup = BeautifulSoup(html or '', 'html.parser')

    title_lower = soup.title.get_text(strip=True).lower() if soup.title else ''

    has_meta_refresh = any(
        (meta.get('http-equiv') or '').strip().lower() == 'refresh'
        for meta in soup.find_all('meta')
    )

    hidden_frame_count = sum(1 for iframe in soup.find_all('iframe') if _is_hidden_iframe(iframe))

    for element in soup(['script', 'style', 'noscript', 'template', 'head']):
        element.decompose()
    body = soup.body or soup
    body_text_lower = ' '.join(body.get_text(separator=' ').split()).lower()

    logger.debug(
        f"Extracted page signals: {len(body_text_lower)} chars, "
        f"meta_refresh={has_meta_refresh}, hidden_iframes={hidden_frame_count}"
    )
    return PageContent(
        body_text_lower=body_text_lower,
        title_lower=title_lower,
        has_meta_refresh=has_meta_refresh,
        hidden_frame_count=hidden_frame_count,
    )
