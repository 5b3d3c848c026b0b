from typing import Optional
from urllib.parse import urlparse
import logging

from pageguard.core.exceptions import InvalidResourceIdentity, NoActiveResource
from pageguard.schemas import ResourceIdentity

logger = logging.getLogger(__name__)

# Browser-internal and local schemes (chrome://, file://, about:) are not analyzable
ANALYZABLE_SCHEMES = ('http', 'https')


def parse_resource(url: Optional[str]) -> ResourceIdentity:
    """
    Decompose a URL into the identity the evaluators work on

    Args:
        url: Full resource URL

    Returns:
        ResourceIdentity with lower-cased scheme and host

    Raises:
        NoActiveResource: url is empty
        InvalidResourceIdentity: url is malformed or not a web resource
    """
    if url is None or not url.strip():
        raise NoActiveResource()

    url = url.strip()
    try:
        parsed = urlparse(url)
        host = parsed.hostname
        # Accessing port validates it
        parsed.port
    except ValueError as e:
        raise InvalidResourceIdentity(url, f"malformed URL ({e})")

    scheme = parsed.scheme.lower()
    if scheme not in ANALYZABLE_SCHEMES:
        raise InvalidResourceIdentity(url, f"unsupported scheme '{scheme or 'none'}'")
    if not host:
        raise InvalidResourceIdentity(url, "missing host")

    return ResourceIdentity(
        url=url,
        scheme=scheme,
        host=host.lower(),
        path=parsed.path,
        query=parsed.query,
    )
