from urllib.parse import urlparse


ALLOWED_SCHEMES = ("http", "https")


def is_valid_url(url) -> bool:
    """
    Validate that a target URL is absolute and uses HTTP or HTTPS.

    Args:
        url: The URL to validate

    Returns:
        True if valid, False otherwise (never raises)
    """
    if not url or not isinstance(url, str):
        return False

    try:
        result = urlparse(url)
        # Port is parsed lazily and raises on garbage such as "http://x:abc"
        result.port
    except ValueError:
        return False

    # Must have scheme and netloc
    if not all([result.scheme, result.netloc]):
        return False

    # Hosts never contain whitespace
    if any(c.isspace() for c in result.netloc):
        return False

    return result.scheme in ALLOWED_SCHEMES
