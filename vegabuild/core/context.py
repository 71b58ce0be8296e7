from __future__ import annotations

import difflib
from typing import Any, List, Never

from pydantic import BaseModel, ConfigDict, Field

from vegabuild.constants import logger
from vegabuild.core.enums import (
    AxisType,
    EntityKind,
    MarkType,
    ScaleType,
    TransformType,
)
from vegabuild.core.exceptions import (
    DuplicateNameException,
    UndefinedReferenceException,
)
from vegabuild.core.models.axes import Axis
from vegabuild.core.models.data import Data
from vegabuild.core.models.marks import GroupMark, Mark
from vegabuild.core.models.scales import Scale
from vegabuild.core.models.transforms import Transform, build_transform
from vegabuild.core.models.visualization import Visualization

LOGGER_PREFIX = "[REGISTRY]"


class BuildContext(BaseModel):
    """Every entity created while building one chart.

    Entities enroll themselves on construction; names are unique per kind
    and references by name are checked against what has been registered so
    far, in insertion order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data_sets: List[Any] = Field(default_factory=list)
    scales: List[Any] = Field(default_factory=list)
    marks: List[Any] = Field(default_factory=list)
    axes: List[Any] = Field(default_factory=list)
    transforms: List[Any] = Field(default_factory=list)

    def entities(self, kind: EntityKind) -> List[Any]:
        return {
            EntityKind.DATA: self.data_sets,
            EntityKind.SCALE: self.scales,
            EntityKind.MARK: self.marks,
            EntityKind.AXIS: self.axes,
            EntityKind.TRANSFORM: self.transforms,
        }[kind]

    def names(self, kind: EntityKind) -> List[str]:
        names = [entity.name() for entity in self.entities(kind)]
        return [name for name in names if name is not None]

    def register(self, entity) -> Any:
        entities = self.entities(entity.kind)
        entities.append(entity)
        name = entity.name()
        if name is not None and self.is_duplicate_name(entity.kind, name):
            entities.remove(entity)
            raise DuplicateNameException(entity.kind, name)
        label = name or type(entity).__name__
        logger.debug(f"{LOGGER_PREFIX} registered {entity.kind.value} {label}")
        return entity

    def find_by_name(self, kind: EntityKind, name: str) -> Any | None:
        for entity in self.entities(kind):
            if entity.name() == name:
                return entity
        return None

    def is_duplicate_name(self, kind: EntityKind, name: str) -> bool:
        return sum(1 for entity in self.entities(kind) if entity.name() == name) >= 2

    def claim_name(self, entity, name: str):
        """Reject a name already taken by another entity of the same kind."""
        for existing in self.entities(entity.kind):
            if existing is not entity and existing.name() == name:
                raise DuplicateNameException(entity.kind, name)

    def require(self, kind: EntityKind, name: str) -> Any:
        found = self.find_by_name(kind, name)
        if found is None:
            self.raise_undefined(kind, name)
        return found

    def raise_undefined(self, kind: EntityKind, name: str) -> Never:
        matches = difflib.get_close_matches(str(name), self.names(kind))
        message = f"Undefined {kind.value}: {name}."
        if matches:
            message += f" Suggestions: {matches}"
        raise UndefinedReferenceException(message, kind, matches)

    # factories

    def data(self, name: str, **attributes) -> Data:
        return Data(self, name, **attributes)

    def scale(self, type: ScaleType | str, name: str, **attributes) -> Scale:
        return Scale(self, type, name, **attributes)

    def linear_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.LINEAR, name, **attributes)

    def log_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.LOG, name, **attributes)

    def pow_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.POW, name, **attributes)

    def sqrt_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.SQRT, name, **attributes)

    def quantile_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.QUANTILE, name, **attributes)

    def quantize_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.QUANTIZE, name, **attributes)

    def threshold_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.THRESHOLD, name, **attributes)

    def ordinal_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.ORDINAL, name, **attributes)

    def time_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.TIME, name, **attributes)

    def utc_scale(self, name: str, **attributes) -> Scale:
        return self.scale(ScaleType.UTC, name, **attributes)

    def transform(self, kind: TransformType | str, **properties) -> Transform:
        transform = build_transform(kind, properties, context=self)
        return self.register(transform)

    def mark(self, type: MarkType | str, **attributes) -> Mark:
        if type in (MarkType.GROUP, MarkType.GROUP.value):
            return GroupMark(self, **attributes)
        return Mark(self, type, **attributes)

    def rect_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.RECT, **attributes)

    def symbol_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.SYMBOL, **attributes)

    def path_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.PATH, **attributes)

    def arc_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.ARC, **attributes)

    def area_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.AREA, **attributes)

    def line_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.LINE, **attributes)

    def image_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.IMAGE, **attributes)

    def text_mark(self, **attributes) -> Mark:
        return self.mark(MarkType.TEXT, **attributes)

    def group_mark(self, **attributes) -> GroupMark:
        return GroupMark(self, **attributes)

    def axis(self, type: AxisType | str, **attributes) -> Axis:
        return Axis(self, type, **attributes)

    def x_axis(self, **attributes) -> Axis:
        return self.axis(AxisType.X, **attributes)

    def y_axis(self, **attributes) -> Axis:
        return self.axis(AxisType.Y, **attributes)

    def visualization(self, **attributes) -> Visualization:
        return Visualization(self, **attributes)
