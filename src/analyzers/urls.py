"""Domain normalization and citation matching."""

from urllib.parse import urlparse


def _hostname(value: str) -> str:
    value = value.strip()
    if "://" not in value:
        value = f"https://{value}"
    host = urlparse(value).hostname or ""
    return host.lower().rstrip(".")


def normalize_domain(value: str) -> str:
    """
    Reduce a URL or bare domain to a lowercase hostname without `www.`.

    `https://www.Example.com/path` -> `example.com`
    """
    host = _hostname(value)
    if host.startswith("www."):
        host = host[4:]
    return host


def domain_matches(url: str, target_domain: str) -> bool:
    """
    True if `url` belongs to `target_domain` or one of its subdomains.

    `https://blog.example.com/post` matches `example.com`;
    `https://notexample.com` does not.
    """
    target = normalize_domain(target_domain)
    if not target:
        return False
    host = normalize_domain(url)
    return host == target or host.endswith(f".{target}")
