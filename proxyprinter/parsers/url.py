"""URL helpers used for routing deck references."""

from urllib.parse import urlsplit


def _hostname(url: str) -> str | None:
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def domain_of(url: str) -> str:
    """
    Canonical domain of a URL, used to pick the deck source.

    Accepts URLs with or without a scheme. The host is lowercased and a
    leading "www." is removed. Returns "" when no host can be found.

    Examples:
        >>> domain_of("https://www.Moxfield.com/decks/abc")
        'moxfield.com'
        >>> domain_of("archidekt.com/decks/1")
        'archidekt.com'
    """
    if not isinstance(url, str):
        return ""

    url = url.strip()
    if not url:
        return ""

    host = _hostname(url)
    if not host and "://" not in url:
        host = _hostname("https://" + url)
    if not host:
        return ""

    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def last_path_segment(url: str) -> str | None:
    """Last non-empty segment of the URL path, e.g. the id in `.../cards/<id>`."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    segments = [segment for segment in path.split("/") if segment]
    return segments[-1] if segments else None
