from __future__ import annotations

import datetime
import decimal
import enum
import functools
import json as pyjson
import pathlib
import typing as t

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]


# encoders
def encode_set(obj: set[t.Any] | frozenset[t.Any]) -> list[t.Any]:
    return sorted(obj, key=repr)


def encode_datetime(obj: datetime.datetime | datetime.date) -> str:
    return obj.isoformat()


def encode_decimal(obj: decimal.Decimal) -> str:
    return str(obj)


def encode_enum(obj: enum.Enum) -> JSONValue:
    return obj.value


def encode_path(obj: pathlib.Path) -> str:
    return str(obj)


def encode_pydantic(obj: p.BaseModel) -> dict[str, JSONValue]:
    return obj.model_dump(mode="json")


def encode_timedelta(obj: datetime.timedelta) -> float:
    return obj.total_seconds()


@functools.cache  # noqa: E302
def _encoder_map() -> dict[type, t.Callable[[t.Any], JSONValue]]:
    return {
        datetime.date: encode_datetime,
        datetime.datetime: encode_datetime,
        datetime.timedelta: encode_timedelta,
        decimal.Decimal: encode_decimal,
        enum.Enum: encode_enum,
        frozenset: encode_set,
        pathlib.Path: encode_path,
        set: encode_set,
    }


# stdlib-compatible JSON encoder
class JSONEncoder(pyjson.JSONEncoder):
    def get_encoders(self) -> dict[type, t.Callable[[t.Any], JSONValue]]:
        return _encoder_map()

    def default(self, o: t.Any) -> JSONValue:
        if isinstance(o, p.BaseModel):
            return encode_pydantic(o)

        encoders = self.get_encoders()
        for tp in encoders:
            if isinstance(o, tp):
                encoder = encoders[tp]
                return encoder(o)

        return pyjson.JSONEncoder.default(self, o)


def dumps(
    obj: t.Any,
    *,
    cls: type[pyjson.JSONEncoder] = JSONEncoder,
    indent: int | str | None = None,
    sort_keys: bool = False,
    **kw: t.Any,
) -> str:
    return pyjson.dumps(obj, cls=cls, indent=indent, sort_keys=sort_keys, **kw)


def loads(s: str | bytes | bytearray, **kw: t.Any) -> JSONValue:
    """implemented for parity's sake"""
    return pyjson.loads(s, **kw)
