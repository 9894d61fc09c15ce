"""Text helpers shared by content services."""

import re
import unicodedata
from typing import Optional

from ..core.constants import EXCERPT_LENGTH

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lower-case ASCII slug: ``"Why Design?"`` -> ``"why-design"``."""
    ascii_value = unicodedata.normalize("NFKD", value or "").encode("ascii", "ignore").decode("ascii")
    return _NON_SLUG.sub("-", ascii_value.lower()).strip("-")


def make_excerpt(content: Optional[str], length: int = EXCERPT_LENGTH) -> str:
    text = (content or "").strip()
    if len(text) <= length:
        return text
    return text[:length] + "..."
