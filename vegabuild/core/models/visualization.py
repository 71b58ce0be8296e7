from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, List

from pydantic import ValidationError

from vegabuild.constants import CONFIG, logger
from vegabuild.core.attributes import (
    Builder,
    MultiValue,
    SchemaModel,
    SingleValue,
    serialize,
)
from vegabuild.core.exceptions import InvalidInputException
from vegabuild.core.models.axes import Axis, require_scaled
from vegabuild.core.models.data import Data
from vegabuild.core.models.marks import Mark
from vegabuild.core.models.scales import Scale
from vegabuild.utility import is_number

if TYPE_CHECKING:
    from vegabuild.core.context import BuildContext

LOGGER_PREFIX = "[COMPILER]"

Number = int | float


class Padding(SchemaModel):
    top: Number
    left: Number
    right: Number
    bottom: Number

    @classmethod
    def uniform(cls, value: Number) -> "Padding":
        return cls(top=value, left=value, right=value, bottom=value)


def _require_kind(attribute: str, values: List[Any], kind: type) -> List[Any]:
    invalid = [v for v in values if not isinstance(v, kind)]
    if invalid:
        raise InvalidInputException(
            f"Visualization {attribute} must be {kind.__name__} objects, got {invalid}"
        )
    return values


class Visualization(Builder):
    """Root of the document: sizing plus every data set, scale, mark and axis.

    Width, height and padding take their CONFIG defaults when the
    visualization is built. An unset viewport follows the current width and
    height, so it is only filled in when the document is compiled.
    """

    name = SingleValue()
    width = SingleValue()
    height = SingleValue()
    viewport = SingleValue()
    padding = SingleValue()
    data = MultiValue()
    scales = MultiValue()
    marks = MultiValue()
    axes = MultiValue()

    def __init__(self, context: "BuildContext", **attributes):
        self.context = context
        super().__init__(**attributes)
        if self.width() is None:
            self.width(CONFIG.defaults.width)
        if self.height() is None:
            self.height(CONFIG.defaults.height)
        if self.padding() is None:
            self.padding(CONFIG.defaults.padding)

    @name.processor
    def _process_name(self, value):
        return str(value)

    @width.processor
    @height.processor
    def _process_size(self, value):
        if not is_number(value) or value < 0:
            raise InvalidInputException(f"Invalid visualization size: {value!r}")
        return value

    @viewport.processor
    def _process_viewport(self, value):
        if isinstance(value, dict):
            value = [value.get("width"), value.get("height")]
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise InvalidInputException(f"Invalid viewport: {value!r}")
        if not all(is_number(v) for v in value):
            raise InvalidInputException(
                f"Viewport needs a width and a height: {value!r}"
            )
        return list(value)

    @padding.processor
    def _process_padding(self, value):
        if isinstance(value, Padding):
            return value
        if is_number(value):
            return Padding.uniform(value)
        if isinstance(value, dict):
            try:
                return Padding.model_validate(value)
            except ValidationError as e:
                raise InvalidInputException(f"Invalid padding: {e}")
        raise InvalidInputException(f"Invalid padding: {value!r}")

    @data.processor
    def _process_data(self, values):
        return _require_kind("data", values, Data)

    @scales.processor
    def _process_scales(self, values):
        return _require_kind("scales", values, Scale)

    @marks.processor
    def _process_marks(self, values):
        return _require_kind("marks", values, Mark)

    @axes.processor
    def _process_axes(self, values):
        return require_scaled(_require_kind("axes", values, Axis))

    def collect_attributes(self) -> Dict[str, Any]:
        width, height = self.width(), self.height()
        document: Dict[str, Any] = {}
        if self.name() is not None:
            document["name"] = self.name()
        document["width"] = width
        document["height"] = height
        document["viewport"] = self.viewport() or [width, height]
        document["padding"] = serialize(self.padding())
        for attribute in ("data", "scales", "marks", "axes"):
            values = self.descriptor(attribute).access(self)
            if values:
                document[attribute] = serialize(values)
        return document

    def to_dict(self) -> Dict[str, Any]:
        document = self.collect_attributes()
        logger.debug(
            f"{LOGGER_PREFIX} compiled {len(document.get('data', []))} data sets,"
            f" {len(document.get('scales', []))} scales,"
            f" {len(document.get('marks', []))} marks"
        )
        return document

    def generate_spec(self, pretty: bool = False) -> str:
        document = self.to_dict()
        if pretty:
            return json.dumps(
                document,
                indent=CONFIG.rendering.indent,
                sort_keys=CONFIG.rendering.sort_keys,
            )
        return json.dumps(document, sort_keys=CONFIG.rendering.sort_keys)
