from vegabuild.constants import CONFIG
from vegabuild.core.context import BuildContext
from vegabuild.core.enums import (
    AxisType,
    MarkType,
    Orientation,
    RangeLiteral,
    ScaleType,
    TransformType,
)
from vegabuild.core.exceptions import InvalidInputException
from vegabuild.core.models.visualization import Visualization

__version__ = "0.1.0"

__all__ = [
    "BuildContext",
    "Visualization",
    "InvalidInputException",
    "AxisType",
    "MarkType",
    "Orientation",
    "RangeLiteral",
    "ScaleType",
    "TransformType",
    "CONFIG",
]
