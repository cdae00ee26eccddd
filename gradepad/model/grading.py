import math
import typing as t

import pydantic as p

from .base import BaseModel, WithCtime, WithMtime
from .id import ActivityID, LinkID, ResourceID, SubjectID


class GradeResource(WithCtime):
    resource_id: ResourceID
    label: str
    min_value: float
    max_value: float

    def contains(self, value: float) -> bool:
        """Inclusive bounds check. NaN is never contained."""
        if math.isnan(value):
            return False
        return self.min_value <= value <= self.max_value


class GradingLink(WithCtime):
    link_id: LinkID
    activity_id: ActivityID
    resource_id: ResourceID


class GradeRecord(WithMtime):
    resource_id: ResourceID
    subject_id: SubjectID
    value: float | None = None


class GradeEntry(BaseModel):
    subject_id: SubjectID
    # nan and infinities are let through so that range validation reports them
    value: t.Annotated[float, p.Field(allow_inf_nan=True)]

