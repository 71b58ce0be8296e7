from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, ClassVar, List

from vegabuild.constants import CONFIG, logger
from vegabuild.core.attributes import Attribute, Builder, Flag, MultiValue, SingleValue
from vegabuild.core.enums import (
    AXIS_ORIENTATIONS,
    AxisElement,
    AxisType,
    EntityKind,
    Layer,
    Orientation,
)
from vegabuild.core.exceptions import InvalidInputException
from vegabuild.core.models.marks import MarkProperty, PropertyBuilder, TextProperties
from vegabuild.core.models.scales import Scale
from vegabuild.utility import is_number

if TYPE_CHECKING:
    from vegabuild.core.context import BuildContext

LOGGER_PREFIX = "[MODELS_AXIS]"

# [[fill]align][sign][symbol][0][width][,][.precision][~][type]
NUMBER_FORMAT = re.compile(
    r"^(?:(.)?([<>=^]))?([+\-( ])?([$#])?(0)?(\d+)?(,)?(\.\d+)?(~)?([a-z%])?$",
    re.IGNORECASE,
)

TIME_DIRECTIVE = re.compile(r"%[-_0]?[a-zA-Z%]")

TEXT_ELEMENTS = (AxisElement.LABELS, AxisElement.TITLE)


def is_valid_format(specifier: str) -> bool:
    if TIME_DIRECTIVE.search(specifier):
        return True
    return NUMBER_FORMAT.match(specifier) is not None


def _check_number(attribute: str, value: Any) -> Any:
    if not is_number(value):
        raise InvalidInputException(f"Axis {attribute} must be numeric: {value!r}")
    return value


def require_scaled(axes: List["Axis"]) -> List["Axis"]:
    unscaled = [axis.axis_type.value for axis in axes if axis.scale() is None]
    if unscaled:
        raise InvalidInputException(f"Axes without a scale: {unscaled}")
    return axes


class Axis(Builder):
    """A guide for the domain of one scale."""

    kind: ClassVar[EntityKind] = EntityKind.AXIS

    type = SingleValue(required=True)
    scale = SingleValue()
    orient = SingleValue()
    format = SingleValue()
    ticks = SingleValue()
    values = MultiValue()
    subdivide = SingleValue()
    tick_padding = SingleValue()
    tick_size = SingleValue()
    tick_size_major = SingleValue()
    tick_size_minor = SingleValue()
    tick_size_end = SingleValue()
    offset = SingleValue()
    layer = SingleValue()
    grid = Flag()
    title = SingleValue()
    title_offset = SingleValue()
    properties = Attribute()

    def __init__(self, context: "BuildContext", type: AxisType | str, **attributes):
        self.context = context
        super().__init__(type=type, **attributes)
        context.register(self)

    def name(self) -> None:
        return None

    @property
    def axis_type(self) -> AxisType:
        return self._values["type"]

    @type.processor
    def _process_type(self, value):
        try:
            axis_type = AxisType(value)
        except ValueError:
            raise InvalidInputException(f"Invalid axis type: {value}")
        orient = self._values.get("orient")
        if orient is not None and orient not in AXIS_ORIENTATIONS[axis_type]:
            raise InvalidInputException(
                f"{axis_type.value} axis cannot be oriented {orient.value}"
            )
        return axis_type

    @scale.processor
    def _process_scale(self, value):
        if isinstance(value, Scale):
            return value.name()
        if isinstance(value, str):
            return self.context.require(EntityKind.SCALE, value).name()
        raise InvalidInputException(f"Invalid axis scale: {value!r}")

    @orient.processor
    def _process_orient(self, value):
        try:
            orient = Orientation(value)
        except ValueError:
            raise InvalidInputException(f"Invalid axis orientation: {value}")
        if orient not in AXIS_ORIENTATIONS[self.axis_type]:
            raise InvalidInputException(
                f"{self.axis_type.value} axis cannot be oriented {orient.value}"
            )
        return orient

    @format.processor
    def _process_format(self, value):
        if not isinstance(value, str):
            raise InvalidInputException(f"Invalid axis format: {value!r}")
        if CONFIG.validation.strict_format_specifiers and not is_valid_format(value):
            raise InvalidInputException(f"Invalid axis format specifier: {value}")
        return value

    @ticks.processor
    def _process_ticks(self, value):
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidInputException(f"Axis ticks must be a count: {value!r}")
        return value

    @subdivide.processor
    def _process_subdivide(self, value):
        return _check_number("subdivide", value)

    @tick_padding.processor
    @tick_size.processor
    @tick_size_major.processor
    @tick_size_minor.processor
    @tick_size_end.processor
    @title_offset.processor
    def _process_size(self, value):
        return _check_number("size", value)

    @offset.processor
    def _process_offset(self, value):
        if isinstance(value, dict):
            offset = dict(value)
            if "scale" in offset:
                offset["scale"] = self._process_scale(offset["scale"])
            return offset
        return _check_number("offset", value)

    @layer.processor
    def _process_layer(self, value):
        try:
            return Layer(value)
        except ValueError:
            raise InvalidInputException(f"Invalid axis layer: {value}")

    @title.processor
    def _process_title(self, value):
        return str(value)

    def with_ticks(self, count: int) -> "Axis":
        return self.ticks(count)

    def with_orient(self, orient: Orientation | str) -> "Axis":
        return self.orient(orient)

    def subdivide_by(self, count: int | float) -> "Axis":
        return self.subdivide(count)

    def in_layer(self, layer: Layer | str) -> "Axis":
        return self.layer(layer)

    def with_title(self, title: str, offset: int | float | None = None) -> "Axis":
        self.title(title)
        if offset is not None:
            self.title_offset(offset)
        return self

    def element_properties(self, element: AxisElement | str) -> MarkProperty | None:
        return (self.properties() or {}).get(AxisElement(element))

    def set_properties(
        self,
        element: AxisElement | str,
        builder: PropertyBuilder | None = None,
        **value_refs,
    ) -> "Axis":
        try:
            element = AxisElement(element)
        except ValueError:
            raise InvalidInputException(f"Invalid axis element: {element}")
        model = TextProperties if element in TEXT_ELEMENTS else MarkProperty
        styled = model(self.context, None, **value_refs)
        if builder is not None:
            builder(styled)
        current = dict(self.properties() or {})
        current[element] = styled
        self._values["properties"] = current
        logger.debug(
            f"{LOGGER_PREFIX} styled {self.axis_type.value} axis {element.value}"
        )
        return self
