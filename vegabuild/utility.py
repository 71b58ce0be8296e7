from numbers import Number
from typing import Any, Callable, Hashable, List, TypeVar

UniqueArg = TypeVar("UniqueArg")


def to_camel(name: str) -> str:
    """snake_case builder names to the camelCase keys of the output document.

    A trailing underscore (used to dodge python keywords such as ``from_``)
    is dropped.
    """
    parts = name.rstrip("_").split("_")
    head, rest = parts[0], parts[1:]
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def unique(
    inputs: List[UniqueArg], key: Callable[[UniqueArg], Hashable] | None = None
) -> List[UniqueArg]:
    final = []
    dedupe = set()
    getter = key or (lambda x: x)
    for input in inputs:
        value = getter(input)
        if value in dedupe:
            continue
        dedupe.add(value)
        final.append(input)
    return final
