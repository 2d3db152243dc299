from __future__ import annotations


class UnsupportedArgumentError(TypeError):
    def __init__(self, element: str, kind: str, argument: object = None) -> None:
        super().__init__(f"cannot add {kind} to {element}")
        self.element = element
        self.kind = kind
        self.argument = argument


class UnknownAttributeError(ValueError):
    def __init__(self, element: str, name: str) -> None:
        super().__init__(f"unknown {element} attribute: {name!r}")
        self.element = element
        self.name = name


class InvalidAttributeValueError(ValueError):
    def __init__(self, element: str, name: str, value: object, reason: str | None = None) -> None:
        message = f"invalid value for {element} attribute {name!r}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.element = element
        self.name = name
        self.value = value
