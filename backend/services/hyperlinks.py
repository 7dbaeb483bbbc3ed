"""Classify discovered hyperlinks into LinkedIn / GitHub / portfolio roles."""

from urllib.parse import urlsplit

from models.schemas.raw_extraction import Hyperlink

PORTFOLIO_TLDS: tuple[str, ...] = (
    ".com", ".net", ".org", ".io", ".dev", ".me", ".co", ".app", ".tech",
    ".site", ".xyz", ".ai", ".uk", ".ca", ".au", ".in", ".de",
)
PORTFOLIO_ANCHOR_KEYWORDS: tuple[str, ...] = ("portfolio", "website", "personal", "blog", "site")
_NON_WEB_SCHEMES = ("mailto:", "tel:")


def has_scheme(url: str) -> bool:
    return "://" in url or url.lower().startswith(_NON_WEB_SCHEMES)


def normalize_url(url: str) -> str:
    """Prefix https:// when the URL has no scheme; otherwise return it untouched."""
    url = url.strip()
    if has_scheme(url):
        return url
    return f"https://{url}"


def url_host(url: str) -> str:
    """Lowercased host of a URL, tolerating a missing scheme."""
    try:
        return (urlsplit(normalize_url(url)).hostname or "").lower()
    except ValueError:
        return ""


def is_linkedin_url(url: str) -> bool:
    return "linkedin.com" in url_host(url)


def is_github_url(url: str) -> bool:
    return "github.com" in url_host(url)


def is_portfolio_url(url: str) -> bool:
    """A web URL on a host that is neither LinkedIn nor GitHub."""
    if not url or url.lower().startswith(_NON_WEB_SCHEMES):
        return False
    host = url_host(url)
    return bool(host) and "." in host and not is_linkedin_url(url) and not is_github_url(url)


def find_linkedin(hyperlinks: list[Hyperlink]) -> str | None:
    for link in hyperlinks:
        mentions = "linkedin" in link.anchor_text.lower() and "linkedin.com" in link.url.lower()
        if is_linkedin_url(link.url) or mentions:
            return normalize_url(link.url)
    return None


def find_github(hyperlinks: list[Hyperlink]) -> str | None:
    for link in hyperlinks:
        mentions = "github" in link.anchor_text.lower() and "github.com" in link.url.lower()
        if is_github_url(link.url) or mentions:
            return normalize_url(link.url)
    return None


def find_portfolio(hyperlinks: list[Hyperlink]) -> str | None:
    """First non-LinkedIn/GitHub web link on a known TLD or labelled as a site."""
    for link in hyperlinks:
        if not is_portfolio_url(link.url):
            continue
        if url_host(link.url).endswith(PORTFOLIO_TLDS):
            return normalize_url(link.url)
        anchor = link.anchor_text.lower()
        if any(kw in anchor for kw in PORTFOLIO_ANCHOR_KEYWORDS):
            return normalize_url(link.url)
    return None


def canonical_url(url: str) -> str:
    """Comparison key ignoring scheme, a leading www. and trailing slashes."""
    key = url.strip().lower()
    for prefix in ("https://", "http://"):
        if key.startswith(prefix):
            key = key[len(prefix):]
            break
    if key.startswith("www."):
        key = key[4:]
    return key.rstrip("/")


def is_grounded(url: str, text: str, hyperlinks: list[Hyperlink]) -> bool:
    """True when the URL appears in the discovered hyperlinks or in the source text."""
    key = canonical_url(url)
    if not key:
        return False
    if any(canonical_url(link.url) == key for link in hyperlinks):
        return True
    haystack = text.lower().replace("https://", "").replace("http://", "").replace("www.", "")
    return key in haystack
