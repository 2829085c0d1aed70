import re

from core.common.errors import InvalidEmail

# Common free/public email providers we do not onboard
FREE_EMAIL_DOMAINS = frozenset({
    "gmail.com",
    "yahoo.com",
    "yahoo.co.in",
    "outlook.com",
    "hotmail.com",
    "live.com",
    "msn.com",
    "icloud.com",
    "me.com",
    "mac.com",
    "aol.com",
    "proton.me",
    "protonmail.com",
    "gmx.com",
    "mail.com",
    "zoho.com",
    "yandex.com",
    "hey.com",
    "duck.com",
})

_WWW_PREFIX = re.compile(r"^www\.", re.IGNORECASE)
_SEPARATORS = re.compile(r"[-_]+")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def domain_of(email: str) -> str:
    parts = normalize_email(email).split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidEmail("Invalid email format")
    return parts[1]


def is_company_email(email: str) -> bool:
    try:
        domain = domain_of(email)
    except InvalidEmail:
        return False
    if "." not in domain:
        return False
    return domain not in FREE_EMAIL_DOMAINS


def candidate_url(domain: str) -> str:
    # Heuristic only; reachability is proven (or not) by the fetch.
    if domain.startswith("www."):
        return f"https://{domain}"
    return f"https://www.{domain}"


def display_name(domain: str) -> str:
    """
    "my-shop.com" -> "My Shop", "www.acme.io" -> "Acme".
    Tenant natural key: must stay pure and deterministic.
    """
    without_www = _WWW_PREFIX.sub("", domain or "")
    base = without_www.split(".")[0] or without_www
    tokens = [t for t in _SEPARATORS.sub(" ", base).split(" ") if t]
    name = " ".join(t[:1].upper() + t[1:].lower() for t in tokens)
    return name or domain


def slugify_domain(domain: str) -> str:
    return _NON_ALNUM.sub("-", (domain or "").lower()).strip("-")
