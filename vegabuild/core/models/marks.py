from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, ClassVar, Dict, List, Type

from vegabuild.constants import logger
from vegabuild.core.attributes import (
    Attribute,
    Builder,
    Flag,
    MultiValue,
    SingleValue,
)
from vegabuild.core.enums import EntityKind, Easing, MarkType, PropertySet
from vegabuild.core.exceptions import InvalidInputException
from vegabuild.core.fields import resolve_field
from vegabuild.core.models.data import Data
from vegabuild.core.models.scales import Scale
from vegabuild.core.models.transforms import Transform
from vegabuild.utility import is_number, unique

if TYPE_CHECKING:
    from vegabuild.core.context import BuildContext

LOGGER_PREFIX = "[MODELS_MARK]"


class ValueRef(Builder):
    """The value of one visual property.

    Either a constant ``value`` or a record ``field`` drives the property,
    optionally mapped through ``scale`` and adjusted by ``mult`` and
    ``offset``. ``band`` takes the band width of the scale instead.
    """

    value = Attribute()
    field = SingleValue()
    scale = SingleValue()
    mult = SingleValue()
    offset = SingleValue()
    band = Flag(predicate="uses_band")
    group = SingleValue()

    def __init__(
        self,
        context: "BuildContext",
        extra_fields: List[str] | None = None,
        **attributes,
    ):
        self.context = context
        self.extra_fields = extra_fields
        super().__init__(**attributes)

    @field.processor
    def _process_field(self, value):
        if isinstance(value, str):
            return resolve_field(value, self.extra_fields)
        if isinstance(value, dict):
            if "group" not in value:
                raise InvalidInputException("Missing field group")
            return dict(value)
        raise InvalidInputException(f"Invalid value field: {value!r}")

    @scale.processor
    def _process_scale(self, value):
        if isinstance(value, Scale):
            return value.name()
        if isinstance(value, str):
            return self.context.require(EntityKind.SCALE, value).name()
        if isinstance(value, dict):
            resolved = dict(value)
            if "field" in resolved:
                resolved["field"] = resolve_field(resolved["field"], self.extra_fields)
            return resolved
        raise InvalidInputException(f"Invalid value scale: {value!r}")

    @mult.processor
    @offset.processor
    def _process_numeric(self, value):
        if not is_number(value):
            raise InvalidInputException(f"Expected a number, got {value!r}")
        return value

    @group.processor
    def _process_group(self, value):
        if not isinstance(value, str):
            raise InvalidInputException(f"Invalid value group: {value!r}")
        return value


def make_value_ref(
    context: "BuildContext", extra_fields: List[str] | None, value: Any
) -> ValueRef:
    """Literal, mapping, callable or ready ValueRef to a ValueRef.

    Field names are resolved against ``extra_fields``, the synthetic fields of
    whatever produces the records the property is drawn from.
    """
    if isinstance(value, ValueRef):
        return value
    if isinstance(value, dict):
        return ValueRef(context, extra_fields, **value)
    if callable(value):
        ref = ValueRef(context, extra_fields)
        result = value(ref)
        return result if isinstance(result, ValueRef) else ref
    return ValueRef(context, extra_fields, value=value)


class ValueRefAttribute(SingleValue):
    def process(self, instance: "MarkProperty", value: Any) -> Any:
        if value is None:
            return None
        return make_value_ref(instance.context, instance.extra_fields, value)


class MarkProperty(Builder):
    """Visual properties shared by every mark kind."""

    x = ValueRefAttribute()
    x2 = ValueRefAttribute()
    width = ValueRefAttribute()
    y = ValueRefAttribute()
    y2 = ValueRefAttribute()
    height = ValueRefAttribute()
    opacity = ValueRefAttribute()
    fill = ValueRefAttribute()
    fill_opacity = ValueRefAttribute()
    stroke = ValueRefAttribute()
    stroke_width = ValueRefAttribute()
    stroke_opacity = ValueRefAttribute()
    stroke_dash = ValueRefAttribute()
    stroke_dash_offset = ValueRefAttribute()

    def __init__(
        self,
        context: "BuildContext",
        extra_fields: List[str] | None = None,
        **value_refs,
    ):
        self.context = context
        self.extra_fields = extra_fields
        super().__init__(**value_refs)


class RectProperties(MarkProperty):
    pass


class GroupProperties(MarkProperty):
    pass


class SymbolProperties(MarkProperty):
    size = ValueRefAttribute()
    shape = ValueRefAttribute()


class PathProperties(MarkProperty):
    path = ValueRefAttribute()


class ArcProperties(MarkProperty):
    inner_radius = ValueRefAttribute()
    outer_radius = ValueRefAttribute()
    start_angle = ValueRefAttribute()
    end_angle = ValueRefAttribute()


class AreaProperties(MarkProperty):
    interpolate = ValueRefAttribute()
    tension = ValueRefAttribute()


class LineProperties(MarkProperty):
    interpolate = ValueRefAttribute()
    tension = ValueRefAttribute()


class ImageProperties(MarkProperty):
    url = ValueRefAttribute()
    align = ValueRefAttribute()
    baseline = ValueRefAttribute()


class TextProperties(MarkProperty):
    text = ValueRefAttribute()
    align = ValueRefAttribute()
    baseline = ValueRefAttribute()
    dx = ValueRefAttribute()
    dy = ValueRefAttribute()
    angle = ValueRefAttribute()
    font = ValueRefAttribute()
    font_size = ValueRefAttribute()
    font_weight = ValueRefAttribute()
    font_style = ValueRefAttribute()


MARK_PROPERTY_TYPES: Dict[MarkType, Type[MarkProperty]] = {
    MarkType.RECT: RectProperties,
    MarkType.SYMBOL: SymbolProperties,
    MarkType.PATH: PathProperties,
    MarkType.ARC: ArcProperties,
    MarkType.AREA: AreaProperties,
    MarkType.LINE: LineProperties,
    MarkType.IMAGE: ImageProperties,
    MarkType.TEXT: TextProperties,
    MarkType.GROUP: GroupProperties,
}

PropertyBuilder = Callable[[MarkProperty], Any]


class Mark(Builder):
    """A visual primitive bound to a data set."""

    kind: ClassVar[EntityKind] = EntityKind.MARK

    type = SingleValue(required=True)
    name = SingleValue()
    description = SingleValue()
    from_ = MultiValue()
    properties = Attribute()
    key = SingleValue()
    delay = SingleValue()
    ease = SingleValue()

    def __init__(self, context: "BuildContext", type: MarkType | str, **attributes):
        self.context = context
        self._source_fields: List[str] | None = None
        super().__init__(type=type, **attributes)
        context.register(self)

    @property
    def mark_type(self) -> MarkType:
        return self._values["type"]

    @type.processor
    def _process_type(self, value):
        try:
            mark_type = MarkType(value)
        except ValueError:
            raise InvalidInputException(f"Invalid mark type: {value}")
        if (mark_type == MarkType.GROUP) != isinstance(self, GroupMark):
            raise InvalidInputException("Group marks are built as GroupMark")
        return mark_type

    @name.processor
    def _process_name(self, value):
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputException(f"Invalid Mark name: {value!r}")
        self.context.claim_name(self, value)
        return value

    @from_.processor
    def _process_from(self, values: List[Any]):
        data_name = None
        transforms = []
        for value in values:
            if isinstance(value, Data):
                value = value.name()
            if isinstance(value, str):
                if data_name is not None:
                    raise InvalidInputException("A mark visualizes a single data set")
                self.context.require(EntityKind.DATA, value)
                data_name = value
            elif isinstance(value, Transform):
                transforms.append(value)
            else:
                raise InvalidInputException(f"Invalid Mark from: {value!r}")
        source: Dict[str, Any] = {}
        available = None
        if data_name is not None:
            source["data"] = data_name
            available = self.context.require(EntityKind.DATA, data_name).extra_fields()
        resolved = []
        for transform in transforms:
            fields = available or []
            resolved.append(transform.resolve_fields(fields, self.context))
            available = unique(fields + transform.extra_fields())
        if resolved:
            source["transform"] = resolved
        self._source_fields = available
        return source

    @key.processor
    def _process_key(self, value):
        if not isinstance(value, str):
            raise InvalidInputException(f"Invalid Mark key: {value!r}")
        return resolve_field(value, self.source_fields())

    @delay.processor
    def _process_delay(self, value):
        return make_value_ref(self.context, self.source_fields(), value)

    @ease.processor
    def _process_ease(self, value):
        try:
            return Easing(value)
        except ValueError:
            raise InvalidInputException(f"Invalid easing function: {value}")

    def from_data(self) -> Data | None:
        source = self.from_() or {}
        if "data" not in source:
            return None
        return self.context.find_by_name(EntityKind.DATA, source["data"])

    def source_fields(self) -> List[str] | None:
        """Extra fields of the records this mark draws, after its own transforms."""
        return self._source_fields

    def property_set(self, property_set: PropertySet | str) -> MarkProperty | None:
        return (self.properties() or {}).get(PropertySet(property_set))

    def set_properties(
        self,
        property_set: PropertySet | str,
        builder: PropertyBuilder | None = None,
        **value_refs,
    ) -> "Mark":
        property_set = PropertySet(property_set)
        properties = MARK_PROPERTY_TYPES[self.mark_type](
            self.context, self.source_fields(), **value_refs
        )
        if builder is not None:
            builder(properties)
        current = dict(self.properties() or {})
        current[property_set] = properties
        self._values["properties"] = current
        label = self.name() or self.mark_type.value
        logger.debug(f"{LOGGER_PREFIX} [{label}] set {property_set.value} properties")
        return self

    def enter(self, builder: PropertyBuilder | None = None, **value_refs) -> "Mark":
        return self.set_properties(PropertySet.ENTER, builder, **value_refs)

    def update(self, builder: PropertyBuilder | None = None, **value_refs) -> "Mark":
        return self.set_properties(PropertySet.UPDATE, builder, **value_refs)

    def exit(self, builder: PropertyBuilder | None = None, **value_refs) -> "Mark":
        return self.set_properties(PropertySet.EXIT, builder, **value_refs)

    def hover(self, builder: PropertyBuilder | None = None, **value_refs) -> "Mark":
        return self.set_properties(PropertySet.HOVER, builder, **value_refs)


class GroupMark(Mark):
    """A mark containing its own scales, axes and marks."""

    scales = MultiValue()
    axes = MultiValue()
    marks = MultiValue()

    def __init__(self, context: "BuildContext", **attributes):
        super().__init__(context, MarkType.GROUP, **attributes)

    @scales.processor
    def _process_scales(self, values):
        if not all(isinstance(v, Scale) for v in values):
            raise InvalidInputException("Invalid scales for group mark")
        return values

    @axes.processor
    def _process_axes(self, values):
        from vegabuild.core.models.axes import Axis, require_scaled

        if not all(isinstance(v, Axis) for v in values):
            raise InvalidInputException("Invalid axes for group mark")
        return require_scaled(values)

    @marks.processor
    def _process_marks(self, values):
        if not all(isinstance(v, Mark) for v in values):
            raise InvalidInputException("Invalid marks for group mark")
        if any(v is self for v in values):
            raise InvalidInputException("A group mark cannot contain itself")
        return values
