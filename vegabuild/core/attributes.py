"""Declared attributes shared by every builder entity.

A class declares its attributes as descriptors. Reading one off an instance
yields an accessor that is a getter when called with no arguments and a
setter (returning the owning object, for chaining) otherwise::

    scale.name("x").type(ScaleType.LINEAR)
    scale.name()  # "x"

Serialization walks only the attributes that hold a value and rewrites the
snake_case names used here into the camelCase keys of the output document.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Tuple

from pydantic import BaseModel, ConfigDict

from vegabuild.core.exceptions import ArgumentCountException, InvalidInputException
from vegabuild.utility import to_camel


class Serializable(ABC):
    @abstractmethod
    def collect_attributes(self) -> Dict[str, Any]:
        """Return the output document fragment for this object."""


def serialize(value: Any) -> Any:
    if isinstance(value, Serializable):
        return value.collect_attributes()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    if isinstance(value, dict):
        # keys of plain mappings are user data (record fields, parse hints)
        # and are left as written
        return {
            (k.value if isinstance(k, Enum) else k): serialize(v)
            for k, v in value.items()
        }
    return value


class BoundAccessor:
    __slots__ = ("attribute", "instance")

    def __init__(self, attribute: "Attribute", instance: "Builder"):
        self.attribute = attribute
        self.instance = instance

    def __call__(self, *args):
        return self.attribute.access(self.instance, *args)

    @property
    def value(self) -> Any:
        return self.instance._values.get(self.attribute.name)

    def __repr__(self) -> str:
        return f"<{type(self.instance).__name__}.{self.attribute.name}={self.value!r}>"


class Attribute:
    """Plain attribute; stores the raw value.

    A ``required`` attribute rejects ``None``, both at construction and when
    set later through its accessor.
    """

    def __init__(self, output: str | None = None, required: bool = False):
        self.output = output
        self.required = required
        self.name = ""
        self._processor: Callable[[Any, Any], Any] | None = None

    def __set_name__(self, owner, name: str):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return BoundAccessor(self, instance)

    def __set__(self, instance, value):
        self.access(instance, value)

    @property
    def output_name(self) -> str:
        return self.output or to_camel(self.name)

    def access(self, instance: "Builder", *args):
        if not args:
            return instance._values.get(self.name)
        if len(args) != 1:
            raise ArgumentCountException(
                f"{type(instance).__name__}.{self.name} takes a single value,"
                f" got {len(args)}"
            )
        instance._values[self.name] = self.process(instance, args[0])
        return instance

    def process(self, instance: "Builder", value: Any) -> Any:
        if value is None:
            if self.required:
                raise InvalidInputException(
                    f"{type(instance).__name__} {self.name} is required"
                )
            return None
        if self._processor is None:
            return value
        return self._processor(instance, value)


class SingleValue(Attribute):
    """Exactly one value, optionally normalized before it is stored.

    The normalizer is registered with the ``processor`` decorator and
    receives the owning instance and the raw value::

        scale = SingleValue()

        @scale.processor
        def _resolve_scale(self, value): ...
    """

    def processor(self, func: Callable[[Any, Any], Any]):
        self._processor = func
        return func


class Flag(SingleValue):
    """Boolean attribute in builder style.

    Calling the accessor with no arguments turns the flag on. A predicate
    method (``is_<name>`` unless named otherwise) is added to the owner.
    """

    def __init__(self, predicate: str | None = None, output: str | None = None):
        super().__init__(output=output)
        self.predicate = predicate

    def __set_name__(self, owner, name: str):
        super().__set_name__(owner, name)
        predicate_name = self.predicate or f"is_{name}"
        if predicate_name in owner.__dict__:
            return

        def predicate(instance) -> bool:
            return bool(instance._values.get(name))

        predicate.__name__ = predicate_name
        setattr(owner, predicate_name, predicate)

    def access(self, instance: "Builder", *args):
        if len(args) > 1:
            raise ArgumentCountException(
                f"{type(instance).__name__}.{self.name} takes at most one value,"
                f" got {len(args)}"
            )
        value = args[0] if args else True
        if not isinstance(value, bool):
            raise InvalidInputException(
                f"{type(instance).__name__}.{self.name} must be a boolean,"
                f" got {value!r}"
            )
        instance._values[self.name] = self.process(instance, value)
        return instance


class MultiValue(SingleValue):
    """One list argument or several positional ones, stored as a flat list."""

    def __init__(self, arity: int | None = None, output: str | None = None):
        super().__init__(output=output)
        self.arity = arity

    def access(self, instance: "Builder", *args):
        if not args:
            return instance._values.get(self.name)
        if len(args) == 1 and isinstance(args[0], (list, tuple)):
            values = list(args[0])
        else:
            values = list(args)
        if self.arity is not None and len(values) != self.arity:
            raise InvalidInputException(
                f"{type(instance).__name__}.{self.name} requires {self.arity} values,"
                f" got {len(values)}"
            )
        instance._values[self.name] = self.process(instance, values)
        return instance


class Builder(Serializable):
    _attributes: ClassVar[Tuple[str, ...]] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        names: list[str] = []
        for klass in reversed(cls.__mro__):
            for key, value in vars(klass).items():
                if isinstance(value, Attribute) and key not in names:
                    names.append(key)
        cls._attributes = tuple(names)

    def __init__(self, **attributes: Any):
        self._values: Dict[str, Any] = {}
        self.set_attributes(attributes)

    @classmethod
    def attributes(cls) -> Tuple[str, ...]:
        return cls._attributes

    @classmethod
    def descriptor(cls, name: str) -> Attribute:
        return getattr(cls, name)

    def set_attributes(self, attributes: Dict[str, Any]):
        unknown = [key for key in attributes if key not in self.attributes()]
        if unknown:
            raise InvalidInputException(
                f"Unknown attributes {unknown} for {type(self).__name__}"
            )
        # declaration order, so later attributes can rely on earlier ones
        for key in self.attributes():
            value = attributes.get(key)
            descriptor = self.descriptor(key)
            if value is None and not descriptor.required:
                continue
            descriptor.access(self, value)
        return self

    def defined_attributes(self) -> list[str]:
        return [
            attr for attr in self.attributes() if self._values.get(attr) is not None
        ]

    def collect_attributes(self) -> Dict[str, Any]:
        collected = {}
        for attr in self.defined_attributes():
            collected[self.descriptor(attr).output_name] = serialize(self._values[attr])
        return collected

    def __repr__(self) -> str:
        defined = ", ".join(
            f"{attr}={self._values[attr]!r}" for attr in self.defined_attributes()
        )
        return f"{type(self).__name__}({defined})"


class SchemaModel(BaseModel, Serializable):
    """Static property schema; unknown keys are rejected."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    def collect_attributes(self) -> Dict[str, Any]:
        collected = {}
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None:
                continue
            collected[field.alias or to_camel(name)] = serialize(value)
        return collected
