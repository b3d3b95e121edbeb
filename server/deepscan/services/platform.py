"""
Site platform detection from page markup.
"""

import re
from typing import Optional

from ..models.scan import PlatformInfo

# Checked in order; the first signature found wins
PLATFORM_SIGNATURES: tuple[tuple[str, "re.Pattern[str]", float], ...] = (
    ("Webflow", re.compile(r"webflow", re.IGNORECASE), 0.8),
    ("WordPress", re.compile(r"wp-content|wordpress", re.IGNORECASE), 0.8),
    ("Framer", re.compile(r"framer", re.IGNORECASE), 0.8),
    ("Next.js", re.compile(r"__next", re.IGNORECASE), 0.7),
    ("React", re.compile(r"react", re.IGNORECASE), 0.6),
)

# Serializes the whole document in page context
DOCUMENT_HTML_SCRIPT = "() => document.documentElement.outerHTML"


def detect_platform(html: Optional[str]) -> Optional[PlatformInfo]:
    """
    Guess the site platform from its HTML.

    Args:
        html: Full document markup

    Returns:
        PlatformInfo for the first matching signature, or None
    """
    if not html:
        return None

    for name, pattern, confidence in PLATFORM_SIGNATURES:
        if pattern.search(html):
            return PlatformInfo(name=name, confidence=confidence)

    return None
