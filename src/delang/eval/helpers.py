from __future__ import annotations

from ..types import DeValue
from .common import stringify

def is_truthy(val: DeValue) -> bool:
    # A condition holds when its rendered text mentions true; comparison
    # results render as exactly "true"/"false".
    text = stringify(val)
    return "true" in text or "True" in text
