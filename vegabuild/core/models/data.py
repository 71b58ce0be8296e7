from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Type
from urllib.parse import urlparse

from pydantic import ValidationError

from vegabuild.constants import STRUCTURAL_FIELDS, logger
from vegabuild.core.attributes import Builder, MultiValue, SchemaModel, SingleValue
from vegabuild.core.enums import DataFormatType, EntityKind, ParseType
from vegabuild.core.exceptions import InvalidInputException
from vegabuild.core.models.transforms import Transform
from vegabuild.utility import unique

if TYPE_CHECKING:
    from vegabuild.core.context import BuildContext

LOGGER_PREFIX = "[MODELS_DATA]"


class DataFormat(SchemaModel):
    """How a data file is to be parsed by the grammar interpreter."""

    format_type: ClassVar[DataFormatType]

    def _add_parse(self, parse_type: ParseType, fields) -> "DataFormat":
        if "parse" not in type(self).model_fields:
            raise InvalidInputException(
                f"{self.format_type.value} format does not take parse options"
            )
        parse = dict(getattr(self, "parse") or {})
        for field in _flatten(fields):
            parse[field] = parse_type
        setattr(self, "parse", parse)
        return self

    def date(self, *fields) -> "DataFormat":
        return self._add_parse(ParseType.DATE, fields)

    def number(self, *fields) -> "DataFormat":
        return self._add_parse(ParseType.NUMBER, fields)

    def boolean(self, *fields) -> "DataFormat":
        return self._add_parse(ParseType.BOOLEAN, fields)

    def collect_attributes(self) -> Dict[str, Any]:
        return {"type": self.format_type.value, **super().collect_attributes()}


class JsonFormat(DataFormat):
    format_type = DataFormatType.JSON

    parse: Dict[str, ParseType] | None = None
    property: str | None = None


class CsvFormat(DataFormat):
    format_type = DataFormatType.CSV

    parse: Dict[str, ParseType] | None = None


class TsvFormat(DataFormat):
    format_type = DataFormatType.TSV

    parse: Dict[str, ParseType] | None = None


class TopoJsonFormat(DataFormat):
    format_type = DataFormatType.TOPOJSON

    feature: str | None = None
    mesh: str | None = None


class TreeJsonFormat(DataFormat):
    format_type = DataFormatType.TREEJSON

    parse: Dict[str, ParseType] | None = None
    children: str | None = None


FORMAT_TYPES: Dict[DataFormatType, Type[DataFormat]] = {
    cls.format_type: cls
    for cls in (JsonFormat, CsvFormat, TsvFormat, TopoJsonFormat, TreeJsonFormat)
}


def build_format(format_type: DataFormatType | str, **options) -> DataFormat:
    try:
        model = FORMAT_TYPES[DataFormatType(format_type)]
    except ValueError:
        raise InvalidInputException(f"Invalid data format: {format_type}")
    try:
        return model.model_validate(options)
    except ValidationError as e:
        raise InvalidInputException(
            f"Invalid options for {model.format_type.value} format: {e}"
        )


def _flatten(values) -> List[Any]:
    flat = []
    for value in values:
        if isinstance(value, (list, tuple)):
            flat.extend(_flatten(value))
        else:
            flat.append(value)
    return flat


def parse_values(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidInputException(f"Invalid JSON values in Data: {e}")


def validate_url(url: Any) -> str:
    if not isinstance(url, str) or not url.strip():
        raise InvalidInputException(f"Invalid URL for Data: {url!r}")
    if any(char.isspace() for char in url):
        raise InvalidInputException(f"Invalid URL for Data: {url!r}")
    try:
        urlparse(url)
    except ValueError as e:
        raise InvalidInputException(f"Invalid URL for Data: {url!r} ({e})")
    return url


class Data(Builder):
    """A named data set: inline values, a url, or another data set transformed."""

    kind: ClassVar[EntityKind] = EntityKind.DATA

    name = SingleValue(required=True)
    format = SingleValue()
    values = SingleValue()
    source = SingleValue()
    url = SingleValue()
    transform = MultiValue()

    def __init__(self, context: "BuildContext", name: str, **attributes):
        self.context = context
        super().__init__(name=name, **attributes)
        context.register(self)

    def file(self, *args):
        return self.url(*args)

    def with_format(self, format_type: DataFormatType | str, **options) -> "Data":
        return self.format(build_format(format_type, **options))

    @name.processor
    def _process_name(self, value):
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputException("Name missing for Data object")
        self.context.claim_name(self, value)
        return value

    @format.processor
    def _process_format(self, value):
        if isinstance(value, DataFormat):
            return value
        if isinstance(value, dict):
            options = dict(value)
            return build_format(options.pop("type", None), **options)
        return build_format(value)

    @values.processor
    def _process_values(self, value):
        if isinstance(value, str):
            return parse_values(value)
        if isinstance(value, (list, dict)):
            return value
        raise InvalidInputException(
            f"Unsupported value type in Data: {type(value).__name__}"
        )

    @source.processor
    def _process_source(self, value):
        if isinstance(value, Data):
            value = value.name()
        if not isinstance(value, str):
            raise InvalidInputException(f"Unknown Data source: {value!r}")
        if value == self.name():
            raise InvalidInputException(f"Data {value} cannot be its own source")
        self.context.require(EntityKind.DATA, value)
        return value

    @url.processor
    def _process_url(self, value):
        return validate_url(value)

    @transform.processor
    def _process_transform(self, values: List[Any]):
        invalid = [t for t in values if not isinstance(t, Transform)]
        if invalid:
            raise InvalidInputException(f"Invalid Data transform: {invalid}")
        available = self.base_extra_fields()
        resolved = []
        for transform in values:
            resolved.append(transform.resolve_fields(available, self.context))
            available = unique(available + transform.extra_fields())
        logger.debug(
            f"{LOGGER_PREFIX} [{self.name()}] attached {len(values)} transforms"
        )
        return resolved

    def base_extra_fields(self) -> List[str]:
        fields = list(STRUCTURAL_FIELDS)
        source = self.source()
        if source:
            parent = self.context.find_by_name(EntityKind.DATA, source)
            if parent is not None:
                fields.extend(parent.extra_fields())
        return unique(fields)

    def extra_fields(self) -> List[str]:
        fields = self.base_extra_fields()
        for transform in self.transform() or []:
            fields.extend(transform.extra_fields())
        return unique(fields)

    def is_flat(self) -> bool:
        """Values given as plain scalars rather than records."""
        values = self.values()
        return isinstance(values, list) and not all(
            isinstance(v, dict) for v in values
        )
