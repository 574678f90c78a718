"""Skill-name normalization shared by candidates and job requisitions."""

from typing import Iterable, List


def normalize_skill(name: str) -> str:
    """Comparison key for a skill name: surrounding whitespace trimmed, lowercased.

    Inner whitespace runs are collapsed so "Node  JS" and "node js" compare equal.
    """
    return " ".join(name.split()).lower()


def clean_skill_names(names: Iterable[str]) -> List[str]:
    """Strip skill names, drop blanks and collapse case-insensitive duplicates.

    The first spelling of each skill is kept, in input order.

    Example:
        >>> clean_skill_names([" React", "react", "", "Node"])
        ['React', 'Node']
    """
    cleaned: List[str] = []
    seen = set()

    for name in names:
        if name is None:
            continue
        display = " ".join(str(name).split())
        key = display.lower()
        if not key or key in seen:
            continue
        seen.add(key)
        cleaned.append(display)

    return cleaned
