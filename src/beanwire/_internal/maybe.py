from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class Maybe:
    """Carry a resolver outcome that can hold ``None`` without abstaining.

    ``Maybe.produced(None)`` means "bind this dependency to ``None``", while
    ``Maybe.abstain()`` means "no opinion, ask the next resolver". Check
    ``abstained`` before reading ``value``.
    """

    value: Any = None
    abstained: bool = False

    _ABSTAIN: ClassVar[Maybe]

    @classmethod
    def produced(cls, value: Any) -> Maybe:
        """Wrap a resolved value, including ``None``."""
        return cls(value=value, abstained=False)

    @classmethod
    def abstain(cls) -> Maybe:
        """Return the shared abstain sentinel."""
        return cls._ABSTAIN

    def __repr__(self) -> str:
        if self.abstained:
            return "Maybe.abstain()"
        return f"Maybe.produced({self.value!r})"


Maybe._ABSTAIN = Maybe(value=None, abstained=True)

__all__ = ["Maybe"]
