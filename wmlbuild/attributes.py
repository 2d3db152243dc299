from __future__ import annotations

from dataclasses import dataclass

BORDER_SEPARATOR = ":"


@dataclass(frozen=True)
class Attr:
    """A WordprocessingML attribute assignment passed to a builder.

    Attributes carry no context: the builder that receives one decides
    whether the name means anything and parses the value.
    """

    name: str
    value: str


def attr(name: str, value: object) -> Attr:
    return Attr(name, _render(value))


def val(value: object) -> Attr:
    return attr("val", value)


def fill(value: str) -> Attr:
    return attr("fill", value)


def before(value: int) -> Attr:
    return attr("before", value)


def after(value: int) -> Attr:
    return attr("after", value)


def line(value: int) -> Attr:
    return attr("line", value)


def line_rule(value: str) -> Attr:
    return attr("lineRule", value)


def first_line(value: int) -> Attr:
    return attr("firstLine", value)


def hanging(value: int) -> Attr:
    return attr("hanging", value)


def left(value: object, width: int | None = None) -> Attr:
    return attr("left", _compound(value, width))


def right(value: object, width: int | None = None) -> Attr:
    return attr("right", _compound(value, width))


def top(value: object, width: int | None = None) -> Attr:
    return attr("top", _compound(value, width))


def bottom(value: object, width: int | None = None) -> Attr:
    return attr("bottom", _compound(value, width))


def ascii(value: str) -> Attr:
    return attr("ascii", value)


def hAnsi(value: str) -> Attr:
    return attr("hAnsi", value)


def eastAsia(value: str) -> Attr:
    return attr("eastAsia", value)


def br_type(value: str) -> Attr:
    return attr("type", value)


def _compound(value: object, width: int | None) -> str:
    if width is None:
        return _render(value)
    return f"{_render(value)}{BORDER_SEPARATOR}{_render(width)}"


def _render(value: object) -> str:
    return str(value)
