from __future__ import annotations

import re
from typing import Any, Callable, Iterable

from docx.oxml import OxmlElement
from docx.oxml.ns import pfxmap, qn
from lxml import etree

from . import config
from .attributes import BORDER_SEPARATOR, Attr
from .errors import InvalidAttributeValueError, UnknownAttributeError, UnsupportedArgumentError
from .fragments import flatten

Handler = Callable[[etree._Element, Any], None]
Setter = Callable[[etree._Element, Attr], None]

KIND_ATTRIBUTE = "Attr"
KIND_TEXT = "str"
KIND_NUMBER = "int"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# CT_PPrBase / CT_RPr / CT_PBdr child order
_PPR_SEQUENCE = (
    "w:pStyle",
    "w:keepNext",
    "w:keepLines",
    "w:pageBreakBefore",
    "w:framePr",
    "w:widowControl",
    "w:numPr",
    "w:suppressLineNumbers",
    "w:pBdr",
    "w:shd",
    "w:tabs",
    "w:suppressAutoHyphens",
    "w:kinsoku",
    "w:wordWrap",
    "w:overflowPunct",
    "w:topLinePunct",
    "w:autoSpaceDE",
    "w:autoSpaceDN",
    "w:bidi",
    "w:adjustRightInd",
    "w:snapToGrid",
    "w:spacing",
    "w:ind",
    "w:contextualSpacing",
    "w:mirrorIndents",
    "w:suppressOverlap",
    "w:jc",
    "w:textDirection",
    "w:textAlignment",
    "w:textboxTightWrap",
    "w:outlineLvl",
    "w:divId",
    "w:cnfStyle",
    "w:rPr",
    "w:sectPr",
    "w:pPrChange",
)
_RPR_SEQUENCE = (
    "w:rStyle",
    "w:rFonts",
    "w:b",
    "w:bCs",
    "w:i",
    "w:iCs",
    "w:caps",
    "w:smallCaps",
    "w:strike",
    "w:dstrike",
    "w:outline",
    "w:shadow",
    "w:emboss",
    "w:imprint",
    "w:noProof",
    "w:snapToGrid",
    "w:vanish",
    "w:webHidden",
    "w:color",
    "w:spacing",
    "w:w",
    "w:kern",
    "w:position",
    "w:sz",
    "w:szCs",
    "w:highlight",
    "w:u",
    "w:effect",
    "w:bdr",
    "w:shd",
    "w:fitText",
    "w:vertAlign",
    "w:rtl",
    "w:cs",
    "w:em",
    "w:lang",
    "w:eastAsianLayout",
    "w:specVanish",
    "w:oMath",
)
_PBDR_SEQUENCE = ("w:top", "w:left", "w:bottom", "w:right", "w:between", "w:bar")
BORDER_SIDES = frozenset({"top", "left", "bottom", "right"})

JC_VALUES = frozenset(
    {
        "start",
        "center",
        "end",
        "both",
        "left",
        "right",
        "distribute",
        "mediumKashida",
        "highKashida",
        "lowKashida",
        "numTab",
        "thaiDistribute",
    }
)
UNDERLINE_VALUES = frozenset(
    {
        "single",
        "words",
        "double",
        "thick",
        "dotted",
        "dottedHeavy",
        "dash",
        "dashedHeavy",
        "dashLong",
        "dashLongHeavy",
        "dotDash",
        "dashDotHeavy",
        "dotDotDash",
        "dashDotDotHeavy",
        "wave",
        "wavyHeavy",
        "wavyDouble",
        "none",
    }
)
BREAK_TYPES = frozenset({"page", "column", "textWrapping"})
LINE_RULES = frozenset({"auto", "exact", "atLeast"})

# attributes on w:p / w:r apply once the final properties block is in place
_DEFERRED = frozenset({KIND_ATTRIBUTE})


# -- argument classification -------------------------------------------------


def argument_kind(arg: object) -> str:
    """Return the dispatch kind of a builder argument.

    Nodes are classified by their prefixed tag (``"w:pPr"``), attribute
    values as ``"Attr"``, text as ``"str"`` and integers as ``"int"``.
    Everything else reports its type name, which no builder accepts.
    """
    if isinstance(arg, Attr):
        return KIND_ATTRIBUTE
    if isinstance(arg, bool):
        return type(arg).__name__
    if isinstance(arg, str):
        return KIND_TEXT
    if isinstance(arg, int):
        return KIND_NUMBER
    if isinstance(arg, etree._Element):
        return _prefixed_tag(arg)
    return type(arg).__name__


def _prefixed_tag(element: etree._Element) -> str:
    tag = element.tag
    if not isinstance(tag, str):
        return type(element).__name__
    qname = etree.QName(tag)
    prefix = pfxmap.get(qname.namespace)
    if prefix is None:
        return tag
    return f"{prefix}:{qname.localname}"


def _build(
    tag: str,
    args: Iterable[Any],
    handlers: dict[str, Handler],
    deferred: frozenset[str] = frozenset(),
) -> etree._Element:
    """Dispatch every argument of ``tag`` to its handler.

    Kinds in ``deferred`` run after all other arguments, in call order, so
    they see the final properties block whatever position it was passed in.
    """
    node = OxmlElement(tag)
    pending: list[tuple[Handler, Any]] = []
    for arg in flatten(tuple(args), tag):
        kind = argument_kind(arg)
        handler = handlers.get(kind)
        if handler is None:
            raise UnsupportedArgumentError(tag, kind, arg)
        if kind in deferred:
            pending.append((handler, arg))
        else:
            handler(node, arg)
    for handler, arg in pending:
        handler(node, arg)
    return node


# -- slot helpers ------------------------------------------------------------


def _append(node: etree._Element, child: etree._Element) -> None:
    node.append(child)


def _set_properties(node: etree._Element, props: etree._Element) -> None:
    existing = node.find(props.tag)
    if existing is not None:
        node.remove(existing)
    node.insert(0, props)


def _properties(node: etree._Element, tag: str) -> etree._Element:
    props = node.find(qn(tag))
    if props is None:
        props = OxmlElement(tag)
        node.insert(0, props)
    return props


def _set_in_sequence(
    parent: etree._Element,
    child: etree._Element,
    sequence: tuple[str, ...],
) -> etree._Element:
    for existing in parent.findall(child.tag):
        parent.remove(existing)
    position = sequence.index(_prefixed_tag(child))
    successors = {qn(tag) for tag in sequence[position + 1 :]}
    for sibling in parent:
        if sibling.tag in successors:
            sibling.addprevious(child)
            return child
    parent.append(child)
    return child


def _child(parent: etree._Element, tag: str, sequence: tuple[str, ...]) -> etree._Element:
    existing = parent.find(qn(tag))
    if existing is not None:
        return existing
    return _set_in_sequence(parent, OxmlElement(tag), sequence)


def _slot(sequence: tuple[str, ...]) -> Handler:
    def handler(node: etree._Element, child: etree._Element) -> None:
        _set_in_sequence(node, child, sequence)

    return handler


# -- attribute setters -------------------------------------------------------


def _parse_int(element: str, name: str, value: str) -> int:
    if not _INT_PATTERN.fullmatch(value):
        raise InvalidAttributeValueError(element, name, value, "expected a base-10 integer")
    return int(value)


def _str_setter(xml_name: str) -> Setter:
    def setter(node: etree._Element, attribute: Attr) -> None:
        node.set(qn(xml_name), attribute.value)

    return setter


def _int_setter(xml_name: str) -> Setter:
    def setter(node: etree._Element, attribute: Attr) -> None:
        number = _parse_int(_prefixed_tag(node), attribute.name, attribute.value)
        node.set(qn(xml_name), str(number))

    return setter


def _choice_setter(xml_name: str, allowed: frozenset[str]) -> Setter:
    def setter(node: etree._Element, attribute: Attr) -> None:
        if attribute.value not in allowed:
            allowed_list = ", ".join(sorted(allowed))
            raise InvalidAttributeValueError(
                _prefixed_tag(node),
                attribute.name,
                attribute.value,
                f"expected one of {allowed_list}",
            )
        node.set(qn(xml_name), attribute.value)

    return setter


def _set_fill(node: etree._Element, attribute: Attr) -> None:
    node.set(qn("w:fill"), attribute.value)
    if node.get(qn("w:val")) is None:
        node.set(qn("w:val"), config.SHADING_PATTERN)


def _set_font_pair(node: etree._Element, attribute: Attr) -> None:
    node.set(qn("w:ascii"), attribute.value)
    node.set(qn("w:hAnsi"), attribute.value)


def _attributes(setters: dict[str, Setter]) -> Handler:
    def handler(node: etree._Element, attribute: Attr) -> None:
        setter = setters.get(attribute.name)
        if setter is None:
            raise UnknownAttributeError(_prefixed_tag(node), attribute.name)
        setter(node, attribute)

    return handler


def _value_handlers(setter: Setter, kind: str = KIND_TEXT, name: str = "val") -> dict[str, Handler]:
    """Accept the value either as ``Attr(name, ...)`` or as a bare primitive."""

    def bare(node: etree._Element, value: Any) -> None:
        setter(node, Attr(name, str(value)))

    return {KIND_ATTRIBUTE: _attributes({name: setter}), kind: bare}


_SPACING_SETTERS: dict[str, Setter] = {
    "before": _int_setter("w:before"),
    "after": _int_setter("w:after"),
    "line": _int_setter("w:line"),
    "lineRule": _choice_setter("w:lineRule", LINE_RULES),
}
_IND_SETTERS: dict[str, Setter] = {
    "left": _int_setter("w:left"),
    "right": _int_setter("w:right"),
    "firstLine": _int_setter("w:firstLine"),
    "hanging": _int_setter("w:hanging"),
}
_SHD_SETTERS: dict[str, Setter] = {
    "fill": _set_fill,
    "val": _str_setter("w:val"),
    "color": _str_setter("w:color"),
}
_FONT_SETTERS: dict[str, Setter] = {
    "val": _set_font_pair,
    "ascii": _str_setter("w:ascii"),
    "hAnsi": _str_setter("w:hAnsi"),
    "eastAsia": _str_setter("w:eastAsia"),
}

# attribute shorthands accepted by paragraphs and runs, by target property
_PARAGRAPH_ATTRIBUTE_SLOTS: tuple[tuple[str, dict[str, Setter]], ...] = (
    ("w:spacing", _SPACING_SETTERS),
    ("w:ind", _IND_SETTERS),
    ("w:shd", {"fill": _set_fill}),
    ("w:pStyle", {"val": _str_setter("w:val")}),
)
_RUN_ATTRIBUTE_SLOTS: tuple[tuple[str, dict[str, Setter]], ...] = (
    ("w:rFonts", {name: _FONT_SETTERS[name] for name in ("ascii", "hAnsi", "eastAsia")}),
    ("w:shd", {"fill": _set_fill}),
)


def _forward_attribute(
    slots: tuple[tuple[str, dict[str, Setter]], ...],
    sequence: tuple[str, ...],
    props_tag: str | None = None,
) -> Handler:
    """Route an attribute into the property child that owns its name.

    With ``props_tag`` the node is a paragraph or run and the attribute lands
    in its properties block, which is created on first use.
    """

    def apply(node: etree._Element, attribute: Attr) -> None:
        for tag, setters in slots:
            setter = setters.get(attribute.name)
            if setter is not None:
                props = node if props_tag is None else _properties(node, props_tag)
                setter(_child(props, tag, sequence), attribute)
                return
        raise UnknownAttributeError(_prefixed_tag(node), attribute.name)

    return apply


# -- content builders --------------------------------------------------------


def w_p(*contents: Any) -> etree._Element:
    return _build("w:p", contents, _P_HANDLERS, _DEFERRED)


def w_r(*contents: Any) -> etree._Element:
    return _build("w:r", contents, _R_HANDLERS, _DEFERRED)


def w_t(*parts: Any) -> etree._Element:
    t = _build("w:t", parts, _T_HANDLERS)
    if t.text is None:
        t.text = ""
    t.set(qn("xml:space"), config.TEXT_SPACE)
    return t


def text_run(text: str) -> etree._Element:
    """The run a bare string becomes inside a paragraph."""
    return w_r(w_t(text))


def w_br(*args: Any) -> etree._Element:
    return _build("w:br", args, _BR_HANDLERS)


def w_tab() -> etree._Element:
    return OxmlElement("w:tab")


def _paragraph_text(p: etree._Element, text: str) -> None:
    p.append(text_run(text))


def _run_text(r: etree._Element, text: str) -> None:
    r.append(w_t(text))


def _append_text(t: etree._Element, text: str) -> None:
    t.text = (t.text or "") + text


_P_HANDLERS: dict[str, Handler] = {
    "w:pPr": _set_properties,
    "w:r": _append,
    KIND_TEXT: _paragraph_text,
    KIND_ATTRIBUTE: _forward_attribute(_PARAGRAPH_ATTRIBUTE_SLOTS, _PPR_SEQUENCE, "w:pPr"),
}
_R_HANDLERS: dict[str, Handler] = {
    "w:rPr": _set_properties,
    "w:t": _append,
    "w:drawing": _append,
    "w:br": _append,
    "w:tab": _append,
    KIND_TEXT: _run_text,
    KIND_ATTRIBUTE: _forward_attribute(_RUN_ATTRIBUTE_SLOTS, _RPR_SEQUENCE, "w:rPr"),
}
_T_HANDLERS: dict[str, Handler] = {KIND_TEXT: _append_text}
_BR_HANDLERS = _value_handlers(_choice_setter("w:type", BREAK_TYPES), name="type")


# -- paragraph properties ----------------------------------------------------


def w_pPr(*props: Any) -> etree._Element:
    return _build("w:pPr", props, _PPR_HANDLERS)


def w_spacing(*attrs: Any) -> etree._Element:
    return _build("w:spacing", attrs, {KIND_ATTRIBUTE: _attributes(_SPACING_SETTERS)})


def w_shd(*attrs: Any) -> etree._Element:
    return _build("w:shd", attrs, {KIND_ATTRIBUTE: _attributes(_SHD_SETTERS)})


def w_ind(*attrs: Any) -> etree._Element:
    return _build("w:ind", attrs, {KIND_ATTRIBUTE: _attributes(_IND_SETTERS)})


def w_pBdr(*borders: Any, strict: bool | None = None) -> etree._Element:
    """Paragraph borders from ``top``/``left``/``bottom``/``right`` values.

    Each value is ``"COLOR:WIDTH"``. A value that does not split into exactly
    two parts produces a side with no attributes, unless ``strict`` (default
    ``config.STRICT_BORDER_SPECS``) is set, in which case it raises
    ``InvalidAttributeValueError``.
    """
    strict_mode = config.STRICT_BORDER_SPECS if strict is None else strict

    def apply(pbdr: etree._Element, attribute: Attr) -> None:
        if attribute.name not in BORDER_SIDES:
            raise UnknownAttributeError("w:pBdr", attribute.name)
        _set_in_sequence(pbdr, _border(attribute, strict_mode), _PBDR_SEQUENCE)

    return _build("w:pBdr", borders, {KIND_ATTRIBUTE: apply})


def _border(attribute: Attr, strict: bool) -> etree._Element:
    side = OxmlElement(f"w:{attribute.name}")
    parts = attribute.value.split(BORDER_SEPARATOR)
    while parts and not parts[-1]:
        parts.pop()
    if len(parts) != 2:
        if strict:
            raise InvalidAttributeValueError(
                "w:pBdr", attribute.name, attribute.value, "expected COLOR:WIDTH"
            )
        return side
    color, width = parts
    size = _parse_int("w:pBdr", attribute.name, width)
    side.set(qn("w:val"), config.BORDER_STYLE)
    side.set(qn("w:sz"), str(size))
    side.set(qn("w:space"), str(config.BORDER_SPACE))
    side.set(qn("w:color"), color)
    return side


def w_pStyle(*attrs: Any) -> etree._Element:
    return _build("w:pStyle", attrs, _value_handlers(_str_setter("w:val")))


def w_jc(*attrs: Any) -> etree._Element:
    return _build("w:jc", attrs, _value_handlers(_choice_setter("w:val", JC_VALUES)))


_PPR_HANDLERS: dict[str, Handler] = {
    "w:spacing": _slot(_PPR_SEQUENCE),
    "w:shd": _slot(_PPR_SEQUENCE),
    "w:ind": _slot(_PPR_SEQUENCE),
    "w:pBdr": _slot(_PPR_SEQUENCE),
    "w:pStyle": _slot(_PPR_SEQUENCE),
    "w:jc": _slot(_PPR_SEQUENCE),
    KIND_ATTRIBUTE: _forward_attribute(_PARAGRAPH_ATTRIBUTE_SLOTS, _PPR_SEQUENCE),
}


# -- run properties ----------------------------------------------------------


def w_rPr(*props: Any) -> etree._Element:
    return _build("w:rPr", props, _RPR_HANDLERS)


def w_b() -> etree._Element:
    return OxmlElement("w:b")


def w_i() -> etree._Element:
    return OxmlElement("w:i")


def w_color(*attrs: Any) -> etree._Element:
    return _build("w:color", attrs, _value_handlers(_str_setter("w:val")))


def w_sz(*attrs: Any) -> etree._Element:
    return _build("w:sz", attrs, _value_handlers(_int_setter("w:val"), kind=KIND_NUMBER))


def w_u(*attrs: Any) -> etree._Element:
    u = _build("w:u", attrs, _value_handlers(_choice_setter("w:val", UNDERLINE_VALUES)))
    if u.get(qn("w:val")) is None:
        u.set(qn("w:val"), config.UNDERLINE_STYLE)
    return u


def w_highlight(*attrs: Any) -> etree._Element:
    return _build("w:highlight", attrs, _value_handlers(_str_setter("w:val")))


def w_rFonts(*attrs: Any) -> etree._Element:
    handlers: dict[str, Handler] = {
        KIND_ATTRIBUTE: _attributes(_FONT_SETTERS),
        KIND_TEXT: lambda node, name: _set_font_pair(node, Attr("val", name)),
    }
    return _build("w:rFonts", attrs, handlers)


_RPR_HANDLERS: dict[str, Handler] = {
    "w:b": _slot(_RPR_SEQUENCE),
    "w:i": _slot(_RPR_SEQUENCE),
    "w:color": _slot(_RPR_SEQUENCE),
    "w:sz": _slot(_RPR_SEQUENCE),
    "w:u": _slot(_RPR_SEQUENCE),
    "w:highlight": _slot(_RPR_SEQUENCE),
    "w:rFonts": _slot(_RPR_SEQUENCE),
    "w:shd": _slot(_RPR_SEQUENCE),
    KIND_ATTRIBUTE: _forward_attribute(_RUN_ATTRIBUTE_SLOTS, _RPR_SEQUENCE),
}


# -- value helpers -----------------------------------------------------------


def center() -> str:
    return "center"


def color_hex(value: str) -> str:
    return value.lstrip("#").upper()


def format_number(number: int) -> str:
    return f"{number:,}"
