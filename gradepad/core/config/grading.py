import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseSettings


class GradingSettings(BaseSettings):
    """Defaults applied when an activity is first activated for ad-hoc grading."""

    default_min: float = 0.0
    default_max: float = 100.0
    label_suffix: str = " G.I"
    display_precision: t.Annotated[int, ant.Ge(0), ant.Le(10)] = 2

    @p.model_validator(mode="after")
    def check_bounds(self) -> "GradingSettings":
        if self.default_min > self.default_max:
            raise ValueError("default_min must not exceed default_max")
        return self
