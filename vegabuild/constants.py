from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any

logger = getLogger("vegabuild")

DEFAULT_WIDTH = 500

DEFAULT_HEIGHT = 500

DEFAULT_PADDING = 5

# fields every record carries regardless of the transforms applied to it
STRUCTURAL_FIELDS = ("data", "index")

INDEX_FIELD = "index"

DATA_FIELD_PREFIX = "data."


@dataclass
class Defaults:
    """Sizing applied to a visualization when none is given"""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    padding: int = DEFAULT_PADDING


@dataclass
class Rendering:
    """Control how the document is rendered to text"""

    indent: int = 2
    sort_keys: bool = False

    @contextmanager
    def temporary(self, **kwargs: Any):
        """
        Context manager to temporarily set attributes and revert them afterwards.

        Usage:
            with CONFIG.rendering.temporary(indent=4):
                vis.generate_spec(pretty=True)
        """
        original_values = {key: getattr(self, key) for key in kwargs}

        for key, value in kwargs.items():
            setattr(self, key, value)

        try:
            yield self
        finally:
            for key, value in original_values.items():
                setattr(self, key, value)


@dataclass
class Resolution:
    """Control field reference resolution"""

    # a bare field with no producing data set becomes data.<field>
    prefix_unscoped_fields: bool = True


@dataclass
class Validation:
    strict_format_specifiers: bool = True


@dataclass
class Config:
    defaults: Defaults = field(default_factory=Defaults)
    rendering: Rendering = field(default_factory=Rendering)
    resolution: Resolution = field(default_factory=Resolution)
    validation: Validation = field(default_factory=Validation)


CONFIG = Config()
