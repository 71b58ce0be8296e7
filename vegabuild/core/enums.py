from enum import Enum

from vegabuild.utility import to_camel


class EntityKind(Enum):
    DATA = "data"
    SCALE = "scale"
    MARK = "mark"
    AXIS = "axis"
    TRANSFORM = "transform"


class DataFormatType(Enum):
    JSON = "json"
    CSV = "csv"
    TSV = "tsv"
    TOPOJSON = "topojson"
    TREEJSON = "treejson"


class ParseType(Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


class ScaleType(Enum):
    LINEAR = "linear"
    LOG = "log"
    POW = "pow"
    SQRT = "sqrt"
    QUANTILE = "quantile"
    QUANTIZE = "quantize"
    THRESHOLD = "threshold"
    ORDINAL = "ordinal"
    TIME = "time"
    UTC = "utc"

    @property
    def is_time(self) -> bool:
        return self in (ScaleType.TIME, ScaleType.UTC)

    @property
    def is_ordinal(self) -> bool:
        return self == ScaleType.ORDINAL

    @property
    def is_quantitative(self) -> bool:
        return self in (
            ScaleType.LINEAR,
            ScaleType.LOG,
            ScaleType.POW,
            ScaleType.SQRT,
            ScaleType.QUANTILE,
            ScaleType.QUANTIZE,
            ScaleType.THRESHOLD,
        )


class RangeLiteral(Enum):
    COLORS = "colors"
    MORE_COLORS = "more_colors"
    WIDTH = "width"
    HEIGHT = "height"
    SHAPES = "shapes"

    @property
    def output(self) -> str:
        return RANGE_LITERAL_OUTPUT.get(self, self.value)


RANGE_LITERAL_OUTPUT = {
    RangeLiteral.COLORS: "category10",
    RangeLiteral.MORE_COLORS: "category20",
}


class TimeInterval(Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def _missing_(cls, value):
        # in_years / in_seconds style plurals
        strval = str(value).lower()
        if strval.endswith("s"):
            return cls(strval[:-1])
        return super()._missing_(value)


class TransformType(Enum):
    # data manipulation
    ARRAY = "array"
    COPY = "copy"
    CROSS = "cross"
    FACET = "facet"
    FILTER = "filter"
    FLATTEN = "flatten"
    FOLD = "fold"
    FORMULA = "formula"
    SLICE = "slice"
    SORT = "sort"
    STATS = "stats"
    TRUNCATE = "truncate"
    UNIQUE = "unique"
    WINDOW = "window"
    ZIP = "zip"

    # visual encoding
    FORCE = "force"
    GEO = "geo"
    GEOPATH = "geopath"
    LINK = "link"
    PIE = "pie"
    STACK = "stack"
    TREEMAP = "treemap"
    WORDCLOUD = "wordcloud"


class MarkType(Enum):
    RECT = "rect"
    SYMBOL = "symbol"
    PATH = "path"
    ARC = "arc"
    AREA = "area"
    LINE = "line"
    IMAGE = "image"
    TEXT = "text"
    GROUP = "group"


class PropertySet(Enum):
    ENTER = "enter"
    UPDATE = "update"
    EXIT = "exit"
    HOVER = "hover"


class AxisType(Enum):
    X = "x"
    Y = "y"


class Orientation(Enum):
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


AXIS_ORIENTATIONS = {
    AxisType.X: (Orientation.TOP, Orientation.BOTTOM),
    AxisType.Y: (Orientation.LEFT, Orientation.RIGHT),
}


class Layer(Enum):
    FRONT = "front"
    BACK = "back"


class AxisElement(Enum):
    TICKS = "ticks"
    MAJOR_TICKS = "majorTicks"
    MINOR_TICKS = "minorTicks"
    LABELS = "labels"
    TITLE = "title"
    AXIS = "axis"

    @classmethod
    def _missing_(cls, value):
        # major_ticks -> majorTicks
        if isinstance(value, str) and "_" in value:
            return cls(to_camel(value))
        return super()._missing_(value)


class Easing(Enum):
    LINEAR = "linear"
    QUAD = "quad"
    CUBIC = "cubic"
    SIN = "sin"
    EXP = "exp"
    CIRCLE = "circle"
    BOUNCE = "bounce"
    ELASTIC = "elastic"
    BACK = "back"
    LINEAR_IN = "linear-in"
    LINEAR_OUT = "linear-out"
    LINEAR_IN_OUT = "linear-in-out"
    CUBIC_IN = "cubic-in"
    CUBIC_OUT = "cubic-out"
    CUBIC_IN_OUT = "cubic-in-out"


class StackOffset(Enum):
    ZERO = "zero"
    SILHOUETTE = "silhouette"
    WIGGLE = "wiggle"
    EXPAND = "expand"


class StackOrder(Enum):
    DEFAULT = "default"
    REVERSE = "reverse"
    INSIDE_OUT = "inside-out"


class LinkShape(Enum):
    LINE = "line"
    CURVE = "curve"
    DIAGONAL = "diagonal"
    DIAGONAL_X = "diagonalX"
    DIAGONAL_Y = "diagonalY"


class TruncatePosition(Enum):
    FRONT = "front"
    MIDDLE = "middle"
    BACK = "back"


class SlicePosition(Enum):
    MIN = "min"
    MAX = "max"
    MEDIAN = "median"
