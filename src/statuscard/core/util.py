import functools
import unicodedata
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")


def compute_domain(entity_id: str) -> str:
    # light.kitchen => light
    return entity_id.split(".", 1)[0]


def is_entity_id(s: str) -> bool:
    return "." in s and " - " not in s


def format_domain(domain: str) -> str:
    # binary_sensor => Binary Sensor
    return " ".join(w[:1].upper() + w[1:] for w in domain.split("_"))


def sort_text(s: str) -> str:
    """Collation key for display names: accents folded, then case folded.

    Approximates locale-aware ordering without depending on the process
    locale, so "Éthan" sorts next to "ethan" and before "Zoe".
    """
    decomposed = unicodedata.normalize("NFKD", s or "")
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold()


def memoize_one(fn: Callable[..., T]) -> Callable[..., T]:
    """Cache the most recent call, keyed by the identity of every argument.

    Registry and state snapshots are replaced wholesale, never mutated, so
    identity is a complete change signal.
    """
    last_args: tuple[Any, ...] | None = None
    last_result: Any = None

    @functools.wraps(fn)
    def wrapper(*args: Any) -> T:
        nonlocal last_args, last_result
        if (
            last_args is not None
            and len(last_args) == len(args)
            and all(a is b for a, b in zip(last_args, args, strict=True))
        ):
            return last_result
        result = fn(*args)
        last_args = args
        last_result = result
        return result

    def cache_clear() -> None:
        nonlocal last_args, last_result
        last_args = None
        last_result = None

    wrapper.cache_clear = cache_clear  # type: ignore[attr-defined]
    return wrapper
