import typing as t
from collections.abc import Mapping

KT = t.TypeVar("KT")
VT = t.TypeVar("VT")
RecursiveMapping = VT | Mapping[KT, "RecursiveMapping[KT, VT]"]


def deep_update(
    d1: dict[KT, RecursiveMapping[KT, VT]], d2: Mapping[KT, RecursiveMapping[KT, VT]]
) -> dict[KT, RecursiveMapping[KT, VT]]:
    result = d1.copy()
    for k, v in d2.items():
        if isinstance(v, Mapping) and k in result and isinstance(result[k], Mapping):
            result[k] = deep_update(result[k], v)  # type: ignore
        else:
            result[k] = v
    return result


def parse_assignment(s: str) -> tuple[str, str]:
    """Split a ``key=value`` CLI argument, stripping whitespace on both sides."""
    if "=" not in s:
        raise ValueError(f"expected key=value, got {s!r}")
    k, v = [part.strip() for part in s.split("=", 1)]
    if not k:
        raise ValueError(f"missing key in {s!r}")
    return k, v
