"""Secret field wrapper that keeps sensitive values out of logs and payloads.

A ``Secret`` owns the value it wraps. The only way to read it is the
``expose()`` accessor, so any boundary that needs the plaintext has to ask
for it by name:

    email = Secret(EmailAddress("me@mail.com"))
    print(email)                    # Secret('**********')
    email.expose().value            # 'me@mail.com'

Wiping:
    The constructor stores its own copy of the value, so wiping never
    touches objects held outside the wrapper. ``wipe()`` asks that private
    copy to ``_zeroize()`` itself (when it knows how) and then drops the
    reference. It runs on ``with`` exit and from
    ``__del__``. CPython gives no deterministic destructor guarantee and
    ``str`` objects are immutable, so the original character buffer may stay
    in memory until the interpreter reuses it. Wiping here is best-effort.
"""

import copy
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_REDACTED = "**********"


class _Wiped:
    def __repr__(self) -> str:
        return "<wiped>"


_WIPED: Any = _Wiped()


class Secret(Generic[T]):
    """Ownership-guarded container for a sensitive value."""

    __slots__ = ("_value",)

    def __init__(self, value: T):
        self._value = copy.copy(value)

    def expose(self) -> T:
        """Return the wrapped value. Call only where the plaintext is needed."""
        if self._value is _WIPED:
            raise ValueError("Secret has been wiped")
        return self._value

    def clone(self) -> "Secret[T]":
        """Return an independent wrapper around a copy of the value."""
        return Secret(self.expose())

    def wipe(self) -> None:
        """Overwrite the wrapped value and release it. Safe to call twice."""
        value = getattr(self, "_value", _WIPED)
        if value is _WIPED:
            return
        zeroize = getattr(value, "_zeroize", None)
        if callable(zeroize):
            zeroize()
        self._value = _WIPED

    @property
    def is_wiped(self) -> bool:
        return self._value is _WIPED

    # ── Scoped release ──────────────────────────────────────────────

    def __enter__(self) -> "Secret[T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.wipe()

    def __del__(self) -> None:
        self.wipe()

    # ── No incidental exposure ──────────────────────────────────────

    def __repr__(self) -> str:
        return f"Secret('{_REDACTED}')"

    __str__ = __repr__

    def __format__(self, format_spec: str) -> str:
        return repr(self)

    def __reduce_ex__(self, protocol: Any) -> Any:
        raise TypeError("Secret values cannot be serialized; call expose() at the boundary")

    def __copy__(self) -> "Secret[T]":
        return self.clone()

    def __deepcopy__(self, memo: dict) -> "Secret[T]":
        return self.clone()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return self._value == other._value

    __hash__ = None  # type: ignore[assignment]
