"""Profile filtering for multi-document YAML sources.

A document may carry a ``profiles`` field listing the profiles it applies
to, for example ``profiles: dev,test`` or ``profiles: "!prod"``. Documents
without the field apply to every profile.
"""

from collections.abc import Mapping, Sequence
from typing import Any

PROFILES_KEY = "profiles"
NEGATION_PREFIX = "!"


def parse_profile_tokens(profiles: Any) -> list[str]:
    """Split a document's ``profiles`` value into trimmed tokens.

    Accepts a comma-separated string or a YAML list. Empty tokens are dropped.
    """
    if isinstance(profiles, str):
        raw = profiles.split(",")
    elif isinstance(profiles, Sequence):
        raw = [str(item) for item in profiles]
    else:
        raw = [str(profiles)]
    return [token.strip() for token in raw if token and token.strip()]


def should_use_document(document: Any, active_profiles: Sequence[str] | None) -> bool:
    """Determine if a YAML document applies to the active profiles.

    Rules:
    - A document without ``profiles`` is always used.
    - ``!name`` with ``name`` active excludes the document outright.
    - ``!name`` with ``name`` inactive, or ``name`` with ``name`` active,
      includes it, unless a negation later excludes it.
    - Otherwise the document is excluded.

    Args:
        document: A parsed YAML document
        active_profiles: Profile names requested by the caller

    Returns:
        True if the document should be merged
    """
    if not isinstance(document, Mapping):
        return False

    document_profiles = document.get(PROFILES_KEY)
    if not document_profiles:
        return True

    active = set(active_profiles or ())
    use_document = False
    for token in parse_profile_tokens(document_profiles):
        if token.startswith(NEGATION_PREFIX):
            excluded = token[len(NEGATION_PREFIX):].strip()
            if not excluded:
                continue
            if excluded in active:
                return False
            use_document = True
        elif token in active:
            use_document = True
    return use_document
