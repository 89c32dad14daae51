from __future__ import annotations

from typing import Optional

from ..types import DeBool, DeNumber, DeText, DeValue


def stringify(value: DeValue) -> str:
    """Textual form used by `show` and by diagnostic renderings."""
    return str(value)


def parse_number_text(text: str) -> Optional[float]:
    """Whole-string float parse; surrounding whitespace and digit separators are not a number."""
    if not text or text != text.strip() or "_" in text:
        return None

    try:
        return float(text)
    except ValueError:
        return None


def as_number(value: DeValue) -> Optional[float]:
    """Numeric view of a value at an operator boundary, or None."""
    match value:
        case DeNumber(value=num):
            return num
        case DeText(value=text):
            return parse_number_text(text)
        case _:
            return None


def number(value: float) -> DeNumber:
    return DeNumber(float(value))


def boolean(value: bool) -> DeBool:
    return DeBool(bool(value))
