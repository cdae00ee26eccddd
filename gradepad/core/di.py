from __future__ import annotations

__all__ = [
    "Closing",
    "Container",
    "Manage",
    "NotReady",
    "Provider",
    "Provide",
    "as_",
    "as_int",
    "as_float",
    "inject",
    "providers",
    "containers",
    "required",
]

import typing as t

import dependency_injector.containers as containers
import dependency_injector.providers as providers
import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import as_float, as_int, ClassGetItemMeta, Closing, Provide, required, TypeModifier

from gradepad.lib.sentinel import NotReady

P = t.ParamSpec("P")
TReturn = t.TypeVar("TReturn")


def inject(fn: t.Callable[P, TReturn]) -> t.Callable[P, TReturn]:  # noqa: E302
    # wiring.inject keeps the signature of fn, which FastAPI reads to resolve
    # Depends() markers; route modules avoid postponed annotations for that reason
    return wiring.inject(fn)


TAs = t.TypeVar("TAs")
T = t.TypeVar("T")


class Manage(object, metaclass=ClassGetItemMeta):
    def __new__(cls, provider: Provider[T] | Container | str):
        return Closing[Provide[provider]]

    @classmethod
    def __class_getitem__(cls, item: Provider[T] | Container | str):
        return cls(item)


def as_(type_: t.Type[TAs]) -> TypeModifier:  # noqa: E302
    """Return custom type modifier."""
    # replace wiring.as_ because that one has typing issues
    return TypeModifier(type_)
