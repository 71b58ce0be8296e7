from typing import Any, List, Sequence

from vegabuild.core.enums import EntityKind


class InvalidInputException(Exception):
    pass


class ArgumentCountException(InvalidInputException):
    pass


class DuplicateNameException(InvalidInputException):
    def __init__(self, kind: EntityKind, name: str):
        message = f"Duplicate {kind.value} name: {name}."
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.name = name


class UndefinedReferenceException(InvalidInputException):
    def __init__(self, message, kind: EntityKind, suggestions: List[str]):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.suggestions = suggestions


class TransformValidationException(InvalidInputException):
    def __init__(self, message, errors: Sequence[Any] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])
