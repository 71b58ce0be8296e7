from __future__ import annotations

import re
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Dict,
    Iterable,
    List,
    Literal,
    Tuple,
    Type,
    Union,
)

from pydantic import (
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from vegabuild.constants import logger
from vegabuild.core.attributes import SchemaModel
from vegabuild.core.enums import (
    EntityKind,
    LinkShape,
    SlicePosition,
    StackOffset,
    StackOrder,
    TransformType,
    TruncatePosition,
)
from vegabuild.core.exceptions import (
    InvalidInputException,
    TransformValidationException,
)
from vegabuild.core.fields import resolve_field, resolve_sort_field

if TYPE_CHECKING:
    from vegabuild.core.context import BuildContext

LOGGER_PREFIX = "[TRANSFORM]"

DATUM_VARIABLE = re.compile(r"\bd\b")

Pair = Tuple[float, float]


def _data_name(value: Any, info: ValidationInfo) -> str:
    """Normalize a Data object or name and check it is registered."""
    from vegabuild.core.models.data import Data

    if value is None:
        return None
    if isinstance(value, Data):
        return value.name()
    if not isinstance(value, str):
        raise ValueError(f"expected a data set name, got {value!r}")
    context: BuildContext | None = (info.context or {}).get("build_context")
    if context is not None:
        context.require(EntityKind.DATA, value)
    return value


class Transform(SchemaModel):
    """Base for every transform kind.

    ``field_properties`` name the properties holding record fields; they are
    resolved once the transform is attached to a data set or a mark.
    """

    kind: ClassVar[EntityKind] = EntityKind.TRANSFORM
    transform_type: ClassVar[TransformType]
    field_properties: ClassVar[Tuple[str, ...]] = ()
    sort_properties: ClassVar[Tuple[str, ...]] = ()
    static_extra_fields: ClassVar[Tuple[str, ...]] = ()

    @property
    def type(self) -> TransformType:
        return self.transform_type

    def name(self) -> None:
        return None

    def extra_fields(self) -> List[str]:
        """Synthetic fields this transform adds to the records flowing through it."""
        return list(self.static_extra_fields)

    def resolve_fields(
        self, extra_fields: Iterable[str], context: "BuildContext | None" = None
    ) -> "Transform":
        """Copy of this transform with its field properties resolved.

        The transform itself is left as written, so each data set or mark it
        is attached to resolves it against its own extra fields.
        """
        extra_fields = list(extra_fields)
        update: Dict[str, Any] = {}
        for name in self.field_properties:
            value = getattr(self, name)
            if value is not None:
                update[name] = _resolve_each(value, extra_fields, resolve_field)
        for name in self.sort_properties:
            value = getattr(self, name)
            if value is not None:
                update[name] = _resolve_each(value, extra_fields, resolve_sort_field)
        logger.debug(
            f"{LOGGER_PREFIX} resolved {self.transform_type.value} fields"
            f" against {extra_fields}"
        )
        return self.model_copy(update=update)

    def collect_attributes(self) -> Dict[str, Any]:
        return {"type": self.transform_type.value, **super().collect_attributes()}


def _resolve_each(value, extra_fields, resolver):
    if isinstance(value, str):
        return resolver(value, extra_fields)
    if isinstance(value, list):
        return [resolver(v, extra_fields) if isinstance(v, str) else v for v in value]
    return value


# Data manipulation transforms


class ArrayTransform(Transform):
    transform_type = TransformType.ARRAY
    field_properties = ("fields",)

    fields: List[str]


class CopyTransform(Transform):
    transform_type = TransformType.COPY
    field_properties = ("from_",)

    from_: str
    fields: List[str]
    as_: List[str] | None = None

    @model_validator(mode="after")
    def check_as_arity(self):
        if self.as_ is not None and len(self.as_) != len(self.fields):
            raise ValueError(
                "copy requires one 'as' name per field,"
                f" got {len(self.as_)} for {len(self.fields)}"
            )
        return self

    def extra_fields(self) -> List[str]:
        return list(self.as_ or self.fields)


class CrossTransform(Transform):
    transform_type = TransformType.CROSS
    static_extra_fields = ("a", "b")

    with_: str | None = None
    diagonal: bool | None = None

    @field_validator("with_", mode="before")
    def check_with(cls, v, info: ValidationInfo):
        return _data_name(v, info)


class FacetTransform(Transform):
    transform_type = TransformType.FACET
    field_properties = ("keys",)
    sort_properties = ("sort",)
    static_extra_fields = ("key", "keys")

    keys: List[str]
    sort: str | List[str] | None = None


class FilterTransform(Transform):
    transform_type = TransformType.FILTER

    test: str

    @field_validator("test")
    def check_datum(cls, v: str):
        if not DATUM_VARIABLE.search(v):
            raise ValueError(f"filter test must reference the datum 'd': {v}")
        return v


class FlattenTransform(Transform):
    transform_type = TransformType.FLATTEN


class FoldTransform(Transform):
    transform_type = TransformType.FOLD
    field_properties = ("fields",)
    static_extra_fields = ("key", "value")

    fields: List[str]


class FormulaTransform(Transform):
    transform_type = TransformType.FORMULA

    field: str
    expr: str

    def extra_fields(self) -> List[str]:
        return [self.field]


class SliceTransform(Transform):
    transform_type = TransformType.SLICE
    field_properties = ("field",)

    by: Union[SlicePosition, Tuple[int, int], int]
    field: str | None = None


class SortTransform(Transform):
    transform_type = TransformType.SORT
    sort_properties = ("by",)

    by: str | List[str]


class StatsTransform(Transform):
    transform_type = TransformType.STATS
    field_properties = ("value",)
    static_extra_fields = (
        "count",
        "min",
        "max",
        "sum",
        "mean",
        "variance",
        "stdev",
        "median",
    )

    value: str
    median: bool | None = None
    assign: bool | None = None


class TruncateTransform(Transform):
    transform_type = TransformType.TRUNCATE
    field_properties = ("value",)

    value: str
    output: str | None = None
    limit: int | None = Field(default=None, ge=0)
    position: TruncatePosition | None = None
    ellipsis: str | None = None
    wordbreak: bool | None = None

    def extra_fields(self) -> List[str]:
        return [self.output or "truncate"]


class UniqueTransform(Transform):
    transform_type = TransformType.UNIQUE
    field_properties = ("field",)

    field: str
    as_: str

    def extra_fields(self) -> List[str]:
        return [self.as_]


class WindowTransform(Transform):
    transform_type = TransformType.WINDOW

    size: int | None = Field(default=None, gt=0)
    step: int | None = Field(default=None, gt=0)


class ZipTransform(Transform):
    transform_type = TransformType.ZIP
    field_properties = ("key",)

    with_: str
    as_: str
    key: str
    with_key: str
    default: Any = None

    @field_validator("with_", mode="before")
    def check_with(cls, v, info: ValidationInfo):
        return _data_name(v, info)

    def extra_fields(self) -> List[str]:
        return [self.as_]

    def resolve_fields(self, extra_fields, context=None) -> "ZipTransform":
        resolved = super().resolve_fields(extra_fields, context)
        # the secondary key lives in the records of the zipped data set
        secondary = (
            context.find_by_name(EntityKind.DATA, self.with_) if context else None
        )
        resolved.with_key = resolve_field(
            self.with_key, secondary.extra_fields() if secondary else None
        )
        return resolved


# Visual encoding transforms


class ForceTransform(Transform):
    transform_type = TransformType.FORCE
    field_properties = ("charge", "link_distance", "link_strength")
    static_extra_fields = ("x", "y")

    links: str
    size: Pair | None = None
    iterations: int | None = Field(default=None, gt=0)
    charge: float | str | None = None
    link_distance: float | str | None = None
    link_strength: float | str | None = None
    friction: float | None = None
    theta: float | None = None
    gravity: float | None = None
    alpha: float | None = None

    @field_validator("links", mode="before")
    def check_links(cls, v, info: ValidationInfo):
        return _data_name(v, info)


class GeoTransform(Transform):
    transform_type = TransformType.GEO
    field_properties = ("lon", "lat")
    static_extra_fields = ("x", "y")

    lon: str
    lat: str
    projection: str | None = None
    center: Pair | None = None
    translate: Pair | None = None
    scale: float | None = None
    rotate: float | None = None
    precision: float | None = None
    clip_angle: float | None = None


class GeopathTransform(Transform):
    transform_type = TransformType.GEOPATH
    field_properties = ("value",)
    static_extra_fields = ("path",)

    value: str | None = None
    projection: str | None = None
    center: Pair | None = None
    translate: Pair | None = None
    scale: float | None = None
    rotate: float | None = None
    precision: float | None = None
    clip_angle: float | None = None


class LinkTransform(Transform):
    transform_type = TransformType.LINK
    field_properties = ("source", "target")
    static_extra_fields = ("path",)

    source: str | None = None
    target: str | None = None
    shape: LinkShape | None = None
    tension: float | None = Field(default=None, ge=0, le=1)


class PieTransform(Transform):
    transform_type = TransformType.PIE
    field_properties = ("value",)
    static_extra_fields = ("start_angle", "end_angle")

    sort: bool | None = None
    value: str | None = None


class StackTransform(Transform):
    transform_type = TransformType.STACK
    field_properties = ("point", "height")
    static_extra_fields = ("y", "y2")

    point: str
    height: str
    offset: StackOffset | None = None
    order: StackOrder | None = None


class TreemapTransform(Transform):
    transform_type = TransformType.TREEMAP
    field_properties = ("value",)
    static_extra_fields = ("x", "y", "width", "height")

    padding: float | List[float] | None = None
    ratio: float | None = None
    round: bool | None = None
    size: Pair | None = None
    sticky: bool | None = None
    value: str | None = None

    @field_validator("padding")
    def check_padding(cls, v):
        if isinstance(v, list) and len(v) != 4:
            raise ValueError("treemap padding takes a single number or four sides")
        return v


class WordcloudTransform(Transform):
    transform_type = TransformType.WORDCLOUD
    field_properties = ("text", "font_size")
    static_extra_fields = (
        "x",
        "y",
        "font",
        "font_size",
        "font_style",
        "font_weight",
        "angle",
    )

    text: str | None = None
    font: str | None = None
    font_size: float | str | None = None
    font_style: str | None = None
    font_weight: str | None = None
    rotate: str | Dict[Literal["random", "alternate"], List[float]] | None = None
    size: Pair | None = None

    @field_validator("rotate")
    def check_rotate(cls, v):
        if isinstance(v, dict) and len(v) != 1:
            raise ValueError(
                "wordcloud rotate takes exactly one of random or alternate"
            )
        return v


TRANSFORM_TYPES: Dict[TransformType, Type[Transform]] = {
    cls.transform_type: cls
    for cls in (
        ArrayTransform,
        CopyTransform,
        CrossTransform,
        FacetTransform,
        FilterTransform,
        FlattenTransform,
        FoldTransform,
        FormulaTransform,
        SliceTransform,
        SortTransform,
        StatsTransform,
        TruncateTransform,
        UniqueTransform,
        WindowTransform,
        ZipTransform,
        ForceTransform,
        GeoTransform,
        GeopathTransform,
        LinkTransform,
        PieTransform,
        StackTransform,
        TreemapTransform,
        WordcloudTransform,
    )
}


def build_transform(
    kind: TransformType | str,
    properties: Dict[str, Any] | None = None,
    context: "BuildContext | None" = None,
) -> Transform:
    try:
        transform_type = TransformType(kind)
    except ValueError:
        raise InvalidInputException(f"Unknown transform type: {kind}")
    model = TRANSFORM_TYPES[transform_type]
    try:
        return model.model_validate(
            properties or {}, context={"build_context": context}
        )
    except ValidationError as e:
        raise TransformValidationException(
            f"Invalid {transform_type.value} transform: {e}", e.errors()
        )
