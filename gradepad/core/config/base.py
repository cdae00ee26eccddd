import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import SettingsConfigDict

from gradepad.model import BaseModel


# NOTE: BaseModel comes second so model_dump() picks up its by_alias=True
#       default; pydantic_settings does not override model_dump
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    model_config = SettingsConfigDict(env_prefix="GRADEPAD_", env_nested_delimiter="__")

    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # specifically allow initialization with a dict
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)


class BaseSecrets(BaseSettings): ...
