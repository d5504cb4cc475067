import re
from collections.abc import Iterable

STOPWORDS = frozenset({
    "inc",
    "llc",
    "ltd",
    "co",
    "corp",
    "store",
    "online",
    "payment",
    "purchase",
    "debit",
    "credit",
    "pos",
    "card",
    "auth",
    "apple pay",
    "google pay",
    "visa",
    "mastercard",
    "discover",
    "#",
    "*",
    "txn",
    "id",
})

_PROCESSOR_PREFIX = re.compile(r"(pos|card|ach|online)\s*[:-]?\s*")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(raw: str | None) -> str:
    """
    Reduce a merchant description to the canonical key used for keyword
    matching and override-by-name lookups.

    Idempotent: normalizing an already normalized name returns it unchanged.
    """
    if not raw:
        return ""
    text = raw.lower()
    text = _PROCESSOR_PREFIX.sub(" ", text)
    text = _NON_ALNUM.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    tokens = [token for token in text.split(" ") if token and token not in STOPWORDS]
    return " ".join(tokens)


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)
