from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, List

from vegabuild.constants import INDEX_FIELD, logger
from vegabuild.core.attributes import Attribute, Builder, Flag, SingleValue
from vegabuild.core.enums import EntityKind, RangeLiteral, ScaleType, TimeInterval
from vegabuild.core.exceptions import ArgumentCountException, InvalidInputException
from vegabuild.core.fields import resolve_field, split_reference
from vegabuild.core.models.data import Data
from vegabuild.utility import is_number

if TYPE_CHECKING:
    from vegabuild.core.context import BuildContext

LOGGER_PREFIX = "[MODELS_SCALE]"


class DataRef(Builder):
    """A resolved pointer into the records of a named data set."""

    data = Attribute()
    field = Attribute()


class BoundedValue(SingleValue):
    """Domain or range; the three argument form also sets <name>_min/_max."""

    def access(self, instance: "Scale", *args):
        if len(args) == 2:
            raise ArgumentCountException(
                f"{self.name} bounds require both a minimum and a maximum"
            )
        if len(args) == 3:
            value, minimum, maximum = args
            if (minimum is None) != (maximum is None):
                raise InvalidInputException(
                    f"{self.name} bounds require both a minimum and a maximum"
                )
            lower = instance.descriptor(f"{self.name}_min")
            upper = instance.descriptor(f"{self.name}_max")
            staged = {
                lower.name: lower.process(instance, minimum),
                upper.name: upper.process(instance, maximum),
            }
            if value is not None:
                staged[self.name] = self.process(instance, value)
            instance._values.update(staged)
            return instance
        return super().access(instance, *args)


class Scale(Builder):
    """Maps a domain of data values to a range of visual values."""

    kind: ClassVar[EntityKind] = EntityKind.SCALE

    name = SingleValue(required=True)
    type = SingleValue(required=True)
    domain = BoundedValue()
    domain_min = SingleValue()
    domain_max = SingleValue()
    range = BoundedValue()
    range_min = SingleValue()
    range_max = SingleValue()
    reverse = Flag()
    round = Flag()

    # ordinal
    points = Flag()
    padding = SingleValue()

    # quantitative and time
    clamp = Flag()
    nice = SingleValue()
    exponent = SingleValue()
    zero = Flag()

    def __init__(
        self,
        context: "BuildContext",
        type: ScaleType | str,
        name: str,
        **attributes,
    ):
        self.context = context
        super().__init__(name=name, type=type, **attributes)
        context.register(self)

    @property
    def scale_type(self) -> ScaleType:
        return self._values["type"]

    @name.processor
    def _process_name(self, value):
        value = str(value)
        if not value.strip():
            raise InvalidInputException("Name missing for Scale object")
        self.context.claim_name(self, value)
        return value

    @type.processor
    def _process_type(self, value):
        try:
            return ScaleType(value)
        except ValueError:
            raise InvalidInputException(f"Invalid scale type: {value}")

    @domain.processor
    def _process_domain(self, value):
        return self._resolve(value, allow_literal=False)

    @range.processor
    def _process_range(self, value):
        return self._resolve(value, allow_literal=True)

    @domain_min.processor
    @domain_max.processor
    @range_min.processor
    @range_max.processor
    def _process_bound(self, value):
        if is_number(value):
            return value
        if isinstance(value, (str, Data)):
            return self._resolve(value, allow_literal=False)
        raise InvalidInputException(f"Invalid scale bound: {value!r}")

    @nice.processor
    def _process_nice(self, value):
        if self.scale_type.is_time:
            if isinstance(value, bool):
                raise InvalidInputException(
                    f"{self.scale_type.value} scale nice takes a time interval"
                )
            try:
                return TimeInterval(value)
            except ValueError:
                raise InvalidInputException(f"Invalid time interval: {value}")
        if self.scale_type.is_quantitative:
            if not isinstance(value, bool):
                raise InvalidInputException(
                    f"{self.scale_type.value} scale nice must be a boolean"
                )
            return value
        raise InvalidInputException(
            f"nice is not supported by {self.scale_type.value} scales"
        )

    @points.processor
    def _process_points(self, value):
        self._require_type("points", self.scale_type.is_ordinal)
        return value

    @padding.processor
    def _process_padding(self, value):
        self._require_type("padding", self.scale_type.is_ordinal)
        if not is_number(value):
            raise InvalidInputException(f"Scale padding must be numeric: {value!r}")
        return value

    @clamp.processor
    def _process_clamp(self, value):
        self._require_type(
            "clamp", self.scale_type.is_quantitative or self.scale_type.is_time
        )
        return value

    @zero.processor
    def _process_zero(self, value):
        self._require_type("zero", self.scale_type.is_quantitative)
        return value

    @exponent.processor
    def _process_exponent(self, value):
        self._require_type("exponent", self.scale_type == ScaleType.POW)
        if not is_number(value):
            raise InvalidInputException(f"Scale exponent must be numeric: {value!r}")
        return value

    def _require_type(self, attribute: str, allowed: bool):
        if not allowed:
            raise InvalidInputException(
                f"{attribute} is not supported by {self.scale_type.value} scales"
            )

    def to_range_literal(self, literal: RangeLiteral | str) -> "Scale":
        try:
            literal = RangeLiteral(literal)
        except ValueError:
            raise InvalidInputException(f"Invalid range literal: {literal}")
        return self.range(literal)

    def nicely(self, interval: TimeInterval | str | None = None) -> "Scale":
        if interval is None:
            return self.nice(True)
        return self.nice(interval)

    def as_points(self) -> "Scale":
        return self.points()

    def _resolve(self, value: Any, allow_literal: bool):
        if isinstance(value, RangeLiteral):
            if not allow_literal:
                raise InvalidInputException(
                    f"Range literal {value.value} is not a valid domain"
                )
            return value.output
        if isinstance(value, DataRef):
            return value
        if isinstance(value, Data):
            return self._data_ref(value.name(), None)
        if isinstance(value, str):
            if allow_literal:
                try:
                    return RangeLiteral(value).output
                except ValueError:
                    pass
                source, _ = split_reference(value)
                if self.context.find_by_name(EntityKind.DATA, source) is None:
                    raise InvalidInputException(f"Invalid range literal: {value}")
            source, field = split_reference(value)
            return self._data_ref(source, field)
        if isinstance(value, (list, tuple)):
            values = list(value)
            return self._multi_field_ref(values) or values
        raise InvalidInputException(
            f"Invalid scale {'range' if allow_literal else 'domain'}: {value!r}"
        )

    def _data_ref(self, source: str, field: str | None) -> DataRef:
        data = self.context.require(EntityKind.DATA, source)
        if field is None or data.is_flat():
            path = INDEX_FIELD
        else:
            path = resolve_field(field, data.extra_fields())
        logger.debug(f"{LOGGER_PREFIX} [{self.name()}] {source}.{field} -> {path}")
        return DataRef(data=source, field=path)

    def _multi_field_ref(self, values: List[Any]) -> DataRef | None:
        """['people.born', 'people.died'] -> one reference to both fields"""
        if len(values) < 2 or not all(
            isinstance(v, str) and "." in v for v in values
        ):
            return None
        references = [split_reference(v) for v in values]
        sources = {source for source, _ in references}
        if len(sources) != 1:
            return None
        source = sources.pop()
        data = self.context.find_by_name(EntityKind.DATA, source)
        if data is None:
            return None
        extra_fields = data.extra_fields()
        return DataRef(
            data=source,
            field=[resolve_field(field, extra_fields) for _, field in references],
        )
