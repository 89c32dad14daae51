from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from typing_extensions import TypeAlias

# ---------- Value Model ----------

@dataclass(frozen=True)
class DeNumber:
    value: float
    def __str__(self) -> str:
        v = self.value
        if math.isnan(v):
            return "NaN"
        if math.isinf(v):
            return "inf" if v > 0 else "-inf"
        if v.is_integer():
            return str(int(v))
        # Shortest round-trip digits, never in exponent form.
        return format(Decimal(repr(v)), "f")

@dataclass(frozen=True)
class DeText:
    value: str
    def __str__(self) -> str:
        return self.value

@dataclass(frozen=True)
class DeBool:
    value: bool
    def __str__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class DeUndefined:
    """Result of reading a name that was never bound."""
    name: str
    def __str__(self) -> str:
        return f"<undefined: {self.name}>"

@dataclass(frozen=True)
class DePlaceholder:
    """Result of calling a function; bodies are never executed."""
    name: str
    def __str__(self) -> str:
        return f"<function call: {self.name}>"

DeValue: TypeAlias = DeNumber | DeText | DeBool | DeUndefined | DePlaceholder

# ---------- Environment ----------

@dataclass
class FunctionInfo:
    name: str
    params: Tuple[str, ...]

@dataclass
class Environment:
    """Variable bindings for one evaluation run.

    Bindings live in an ordered stack of frames. A run starts with one frame,
    which gives the flat global table; block scoping pushes and pops frames
    around `when`/`otherwise` bodies.
    """
    frames: List[Dict[str, DeValue]] = field(default_factory=lambda: [{}])
    functions: Dict[str, FunctionInfo] = field(default_factory=dict)

    def get(self, name: str) -> Optional[DeValue]:
        for frame in reversed(self.frames):
            if name in frame:
                return frame[name]
        return None

    def set(self, name: str, val: DeValue) -> None:
        for frame in reversed(self.frames):
            if name in frame:
                frame[name] = val
                return
        self.frames[-1][name] = val

    def push_frame(self) -> None:
        self.frames.append({})

    def pop_frame(self) -> None:
        if len(self.frames) == 1:
            raise DeRuntimeError("Cannot pop the global frame")
        self.frames.pop()

    @property
    def depth(self) -> int:
        return len(self.frames)

    def bindings(self) -> Dict[str, DeValue]:
        """Visible bindings, inner frames shadowing outer ones."""
        merged: Dict[str, DeValue] = {}
        for frame in self.frames:
            merged.update(frame)
        return merged

    def define_function(self, name: str, params: Tuple[str, ...]) -> None:
        self.functions[name] = FunctionInfo(name, params)

# ---------- Exceptions ----------

class DeRuntimeError(Exception):
    pass

class DeDivisionByZeroError(DeRuntimeError):
    def __init__(self, message: str = "Division by zero"):
        super().__init__(message)
