from typing import Iterable, Tuple

from vegabuild.constants import (
    CONFIG,
    DATA_FIELD_PREFIX,
    INDEX_FIELD,
    STRUCTURAL_FIELDS,
    logger,
)
from vegabuild.utility import to_camel

LOGGER_PREFIX = "[RESOLVER]"

DESCENDING_PREFIX = "-"


def split_reference(token: str) -> Tuple[str, str | None]:
    """'table.field' -> ('table', 'field'); 'table' -> ('table', None)"""
    source, _, field = str(token).partition(".")
    return source, field or None


def resolve_field(field: str | None, extra_fields: Iterable[str] | None = None) -> str:
    """Canonical record path for a field name.

    ``extra_fields`` are the synthetic fields declared by whatever produced
    the records (always including the structural ``data`` and ``index``).
    ``None`` means no producer could be determined.
    """
    if field is None or field == INDEX_FIELD:
        return INDEX_FIELD
    field = str(field)
    if field.startswith(DATA_FIELD_PREFIX):
        return field
    head, _, rest = field.partition(".")
    suffix = f".{rest}" if rest else ""
    if extra_fields is None:
        if head in STRUCTURAL_FIELDS:
            return field
        if not CONFIG.resolution.prefix_unscoped_fields:
            logger.debug(f"{LOGGER_PREFIX} leaving unscoped field {field} as written")
            return field
        return DATA_FIELD_PREFIX + field
    synthetic = {to_camel(extra) for extra in extra_fields}
    if to_camel(head) in synthetic:
        return to_camel(head) + suffix
    return DATA_FIELD_PREFIX + field


def resolve_reference(
    token: str, extra_fields: Iterable[str] | None = None
) -> Tuple[str, str]:
    """'table.field' -> ('table', <resolved path>)

    A reference naming only the data set points at the record index.
    """
    source, field = split_reference(token)
    return source, resolve_field(field, extra_fields)


def resolve_sort_field(field: str, extra_fields: Iterable[str] | None = None) -> str:
    if field.startswith(DESCENDING_PREFIX):
        return DESCENDING_PREFIX + resolve_field(field[1:], extra_fields)
    return resolve_field(field, extra_fields)
