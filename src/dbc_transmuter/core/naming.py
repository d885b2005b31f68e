"""Display name to machine-safe identifier normalization."""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]+")


def snake_case(name: str) -> str:
    """
    Convert a display name into a lower snake_case identifier.

    Example:
        >>> snake_case("EngineSpeed")
        'engine_speed'
        >>> snake_case("ABSStatus 2")
        'abs_status_2'
    """
    s = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    s = _CAMEL_BOUNDARY.sub(r"\1_\2", s)
    s = _NON_ALNUM.sub("_", s)
    return s.strip("_").lower()
