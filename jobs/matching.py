"""Match free-text labels from an import against existing lookup options."""

import logging

from database.models import JOB_TYPES

logger = logging.getLogger(__name__)

EMPLOYMENT_TYPE_HINTS = (
    ("full", "FT"),
    ("part", "PT"),
    ("contract", "C"),
)


def _get(option, key):
    if isinstance(option, dict):
        return option.get(key)
    return getattr(option, key)


def find_option(options, text):
    """Return the first option matching ``text``, or None.

    Tried in order: value equals, label equals, label starts with the text,
    text starts with the label, label contains the text. Case-insensitive.
    """
    normalized = (text or "").strip().lower()
    if not normalized:
        return None

    options = list(options)
    checks = (
        lambda o: (_get(o, "value") or "").lower() == normalized,
        lambda o: (_get(o, "label") or "").lower() == normalized,
        lambda o: (_get(o, "label") or "").lower().startswith(normalized),
        lambda o: normalized.startswith((_get(o, "label") or "").lower()),
        lambda o: normalized in (_get(o, "label") or "").lower(),
    )
    for check in checks:
        for option in options:
            # An empty label would prefix-match everything
            if not _get(option, "label"):
                continue
            if check(option):
                logger.debug(f"Matched '{text}' to existing option '{_get(option, 'label')}'")
                return option
    return None


def find_linkedin_source(sources):
    sources = list(sources)
    for option in sources:
        if (_get(option, "value") or "").lower() == "linkedin":
            return option
    for option in sources:
        if "linkedin" in (_get(option, "label") or "").lower():
            return option
    logger.warning("No LinkedIn source found among job sources")
    return None


def map_employment_type(raw):
    """Map a scraped employment type such as 'Full-time' to a JOB_TYPES key."""
    text = (raw or "").strip()
    if not text:
        return None
    if text in JOB_TYPES:
        return text
    lowered = text.lower()
    for key, label in JOB_TYPES.items():
        if label.lower() == lowered:
            return key
    for hint, key in EMPLOYMENT_TYPE_HINTS:
        if hint in lowered:
            return key
    return None
