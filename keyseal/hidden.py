"""
Guarded container for sensitive byte strings.

HiddenString holds passwords, plaintexts and exported secret keys. The
contents live in a bytearray that is zeroed when the guard is released,
either by leaving a ``with`` block, by calling ``wipe()``, or (best-effort)
when the object is garbage collected.
"""

from __future__ import annotations

from typing import Optional

from .errors import InvalidType
from .primitives import constant_time_equal


class HiddenString:
    """
    Sensitive byte string with scoped wipe-on-release semantics.

    The value is never rendered by ``str()`` or ``repr()``. Implicit copies
    (``copy.copy``, ``copy.deepcopy``, pickling) are refused; use ``copy()``
    when a second owner is genuinely needed.
    """

    __slots__ = ("_buffer", "_wiped")

    def __init__(self, value: bytes | bytearray | str) -> None:
        if isinstance(value, str):
            value = value.encode("utf-8")
        if not isinstance(value, (bytes, bytearray)):
            raise InvalidType("HiddenString expects bytes, bytearray or str")
        self._buffer = bytearray(value)
        self._wiped = False

    def get_bytes(self) -> bytes:
        """Return the contents as immutable bytes."""
        if self._wiped:
            raise ValueError("HiddenString has already been wiped")
        return bytes(self._buffer)

    def get_string(self, encoding: str = "utf-8") -> str:
        """Return the contents decoded as text."""
        return self.get_bytes().decode(encoding)

    def copy(self) -> HiddenString:
        """Explicitly clone the guarded value into a new, independent guard."""
        return HiddenString(self.get_bytes())

    def equals(self, other: HiddenString) -> bool:
        """Constant-time comparison against another HiddenString."""
        if not isinstance(other, HiddenString):
            raise InvalidType("Can only compare HiddenString with HiddenString")
        return constant_time_equal(self.get_bytes(), other.get_bytes())

    def wipe(self) -> None:
        """Zero the buffer. Safe to call more than once."""
        buffer: Optional[bytearray] = getattr(self, "_buffer", None)
        if buffer is not None:
            for i in range(len(buffer)):
                buffer[i] = 0
        self._wiped = True

    @property
    def wiped(self) -> bool:
        return self._wiped

    def __len__(self) -> int:
        return len(self._buffer)

    def __enter__(self) -> HiddenString:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.wipe()

    def __repr__(self) -> str:
        """Redacted representation to prevent accidental disclosure."""
        return "HiddenString([REDACTED])"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        raise TypeError("Use HiddenString.equals() for constant-time comparison")

    __hash__ = None  # type: ignore[assignment]

    def __copy__(self):
        raise TypeError("HiddenString cannot be copied implicitly; use copy()")

    def __deepcopy__(self, memo):
        raise TypeError("HiddenString cannot be copied implicitly; use copy()")

    def __reduce__(self):
        raise TypeError("HiddenString cannot be pickled")

    def __del__(self) -> None:
        """Zero memory on deletion (best-effort)."""
        if hasattr(self, "_buffer"):
            self.wipe()
