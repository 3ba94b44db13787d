"""Plausibility rules: does a domain plausibly belong to a company name?

Used to catch contamination, where a model attributes one company's website
to another (for example a subsidiary listed with its parent's domain).
"""

import re
from typing import List, Optional

from resolver.utils.urls import core_form

CORPORATE_SUFFIX = re.compile(r"(?:bio|tech|soft|systems?|solutions?|corp|inc|llc)$")

STOPWORDS = frozenset({
    # generic corporate
    "inc", "llc", "ltd", "corp", "company", "co", "group", "holdings",
    "limited", "pvt", "private", "plc", "gmbh", "the", "and",
    # geographic
    "india", "indian", "usa", "us", "uk", "europe", "global", "international",
    "america", "american", "asia",
    # top-level domain words
    "com", "net", "org", "io", "ai", "in", "app",
})

MIN_TOKEN_LENGTH = 3

# Known parent/subsidiary names that models routinely cross-attribute
SPECIAL_CASES = (
    (re.compile(r"seventy", re.IGNORECASE), ("seventybio", "2seventy")),
    (re.compile(r"bristol.*myers|bms", re.IGNORECASE), ("bms",)),
)

# Domains frequently misattributed to related companies
PROBLEMATIC_DOMAINS = {
    "bms.com": re.compile(r"bristol.*myers|bms", re.IGNORECASE),
    "bristol-myers.com": re.compile(r"bristol.*myers|bms", re.IGNORECASE),
}


def meaningful_tokens(name: str) -> List[str]:
    """Split a company name into tokens worth matching against a domain.

    Tokens are split on non-alphanumerics, lowercased, stripped of a
    trailing corporate suffix, and dropped when they are stopwords or
    shorter than three characters.

    Example:
        >>> meaningful_tokens("Infosys Technologies Ltd")
        ['infosys', 'technologies']
    """
    tokens = []
    for raw in re.split(r"[^a-z0-9]+", (name or "").lower()):
        if not raw or raw in STOPWORDS:
            continue
        token = CORPORATE_SUFFIX.sub("", raw)
        if len(token) < MIN_TOKEN_LENGTH or token in STOPWORDS:
            continue
        tokens.append(token)
    return tokens


def _special_case_verdict(name: str, domain_core: str) -> Optional[bool]:
    for pattern, valid_domains in SPECIAL_CASES:
        if pattern.search(name):
            return any(valid in domain_core for valid in valid_domains)
    return None


def is_domain_plausible(name: str, domain: str) -> bool:
    """Return True when ``domain`` plausibly belongs to the company ``name``.

    Order of checks:
    1. core forms (alphanumerics only) of name and domain contain one another
    2. any meaningful name token is a substring of the domain core
    3. names with tokens but no match: a known special case decides, else reject
    4. names without tokens: deny-listed domains need a matching name,
       everything else is accepted
    """
    name_core = core_form(name)
    domain_core = core_form(domain)
    if not domain_core:
        return False

    if name_core and (name_core in domain_core or domain_core in name_core):
        return True

    tokens = meaningful_tokens(name)
    if tokens:
        if any(token in domain_core for token in tokens):
            return True
        verdict = _special_case_verdict(name, domain_core)
        return bool(verdict)

    allowed_names = PROBLEMATIC_DOMAINS.get(domain.lower())
    if allowed_names is not None:
        return bool(allowed_names.search(name))

    return True
