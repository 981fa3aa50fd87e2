"""Normalized side-effect hook chains."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import typing as typ

Hook = cabc.Callable[..., object]
HookSpec = Hook | cabc.Sequence[object] | None


@dataclasses.dataclass(frozen=True, slots=True)
class HookChain:
    """Ordered callables invoked for their side effects.

    Build chains with :meth:`from_spec`, which accepts a single callable, a
    sequence mixing callables with other values, or ``None``. Non-callable
    entries are dropped once at construction so invocation needs no type
    inspection.
    """

    hooks: tuple[Hook, ...] = ()

    @classmethod
    def from_spec(cls, spec: HookSpec | HookChain) -> HookChain:
        """Return a chain holding the callable entries of ``spec``."""
        if isinstance(spec, HookChain):
            return spec
        if callable(spec):
            return cls((spec,))
        if isinstance(spec, cabc.Sequence) and not isinstance(spec, str | bytes):
            return cls(tuple(typ.cast("Hook", hook) for hook in spec if callable(hook)))
        return cls()

    def __call__(self, *args: object) -> None:
        """Invoke every hook in order; exceptions propagate."""
        for hook in self.hooks:
            hook(*args)

    def __len__(self) -> int:
        """Return the number of callable hooks."""
        return len(self.hooks)


__all__ = ["Hook", "HookChain", "HookSpec"]
