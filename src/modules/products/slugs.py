"""Slug allocation for products.

``normalize_slug`` turns a display name into ``[a-z0-9-]`` form and
``SlugAllocator.allocate`` makes it unique among stored products:

1. No other product uses the candidate: the candidate is final.
2. Otherwise every ``candidate`` / ``candidate-<n>`` sibling is inspected and
   the result is ``candidate-<max(n) + 1>`` (``candidate-2`` when no numbered
   sibling exists).  Soft-deleted products count, so a freed suffix is never
   reused.

The check-then-allocate sequence is not atomic.  The partial unique constraint
on ``products.slug`` is the authoritative guard; ``ProductService`` retries
with a fresh allocation when a concurrent writer wins the race.
"""

from __future__ import annotations

import re
import time
import unicodedata
from typing import TYPE_CHECKING, Optional

import structlog

if TYPE_CHECKING:
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

SLUG_FALLBACK_PREFIX = "item"
SLUG_MIN_LENGTH = 2
SLUG_MAX_RETRIES = 5

# Applied in order after lower-casing; NFKD handles ordinary accents afterwards.
TRANSLITERATIONS: tuple[tuple[str, str], ...] = (
    ("ß", "ss"),
    ("æ", "ae"),
    ("œ", "oe"),
    ("ø", "o"),
    ("đ", "d"),
    ("ð", "d"),
    ("ł", "l"),
    ("þ", "th"),
    ("&", " and "),
    ("щ", "shch"),
    ("ж", "zh"),
    ("ч", "ch"),
    ("ш", "sh"),
    ("ю", "yu"),
    ("я", "ya"),
    ("ё", "yo"),
    ("х", "kh"),
    ("ц", "ts"),
    ("а", "a"),
    ("б", "b"),
    ("в", "v"),
    ("г", "g"),
    ("д", "d"),
    ("е", "e"),
    ("з", "z"),
    ("и", "i"),
    ("й", "y"),
    ("к", "k"),
    ("л", "l"),
    ("м", "m"),
    ("н", "n"),
    ("о", "o"),
    ("п", "p"),
    ("р", "r"),
    ("с", "s"),
    ("т", "t"),
    ("у", "u"),
    ("ф", "f"),
    ("ы", "y"),
    ("э", "e"),
    ("ъ", ""),
    ("ь", ""),
)

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def normalize_slug(value: Optional[str]) -> str:
    """Lower-case, transliterate, and hyphenate ``value``.

    >>> normalize_slug("Classic White T-Shirt")
    'classic-white-t-shirt'
    """
    text = str(value or "").lower()
    for source, target in TRANSLITERATIONS:
        text = text.replace(source, target)
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    return _NON_SLUG_RUN.sub("-", text).strip("-")


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def fallback_slug(now_ms: Optional[int] = None) -> str:
    """Placeholder for candidates that normalise to (almost) nothing."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{SLUG_FALLBACK_PREFIX}-{_to_base36(now_ms)}"


class SlugAllocator:
    """Derive a unique product slug from a candidate string."""

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def allocate(self, candidate: Optional[str], entity_id: Optional[str] = None) -> str:
        """Return a slug unique among all products except ``entity_id``.

        Never fails: an empty or too-short candidate yields
        ``item-<base36 timestamp>``.
        """
        base = normalize_slug(candidate)
        if len(base) < SLUG_MIN_LENGTH:
            base = fallback_slug()

        if not self._repo.slug_exists(base, exclude_id=entity_id):
            return base

        highest = 1
        suffix = re.compile(rf"{re.escape(base)}-(\d+)")
        for taken in self._repo.find_slug_family(base, exclude_id=entity_id):
            match = suffix.fullmatch(taken)
            if match:
                highest = max(highest, int(match.group(1)))

        slug = f"{base}-{highest + 1}"
        logger.info("product.slug_suffixed", base=base, slug=slug)
        return slug
