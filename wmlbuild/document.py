from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from time import perf_counter
from typing import Any

from docx import Document
from docx.oxml.ns import qn
from lxml import etree

from . import config
from .elements import argument_kind
from .errors import UnsupportedArgumentError
from .fragments import flatten

_BODY = "w:body"


@dataclass
class BuildLogState:
    output_path: Path
    start_time: datetime
    block_count: int = 0
    error: str | None = None
    elapsed_sec: float | None = None


def new_document(template_path: str | Path | None = None) -> Any:
    if template_path is None:
        return Document()
    return Document(str(template_path))


def add_to(target: Any, *elements: Any) -> None:
    """Append built nodes to the body of ``target``, in order.

    ``target`` is a python-docx document or a ``w:body`` element. Fragment
    groups are replaced by their members; a trailing ``w:sectPr`` stays last.
    """
    body = _content_sequence(target)
    sect_pr = body.find(qn("w:sectPr"))
    for element in flatten(elements, _BODY):
        if not isinstance(element, etree._Element):
            raise UnsupportedArgumentError(_BODY, argument_kind(element), element)
        if sect_pr is not None and element is not sect_pr:
            sect_pr.addprevious(element)
        else:
            body.append(element)


def save_document(document: Any, output_path: str | Path | None = None) -> Path:
    path = Path(output_path) if output_path is not None else config.DEFAULT_OUTPUT_PATH
    started = perf_counter()
    log_state = BuildLogState(output_path=path, start_time=datetime.now())
    try:
        log_state.block_count = _block_count(document)
        path.parent.mkdir(parents=True, exist_ok=True)
        document.save(str(path))
    except Exception as exc:
        log_state.error = str(exc)
        log_state.elapsed_sec = perf_counter() - started
        _write_log(log_state)
        raise
    log_state.elapsed_sec = perf_counter() - started
    _write_log(log_state)
    return path


def _content_sequence(target: Any) -> etree._Element:
    if isinstance(target, etree._Element):
        if target.tag != qn(_BODY):
            raise UnsupportedArgumentError("document", argument_kind(target), target)
        return target
    element = getattr(target, "element", None)
    body = getattr(element, "body", None)
    if body is None:
        raise UnsupportedArgumentError("document", argument_kind(target), target)
    return body


def _block_count(document: Any) -> int:
    body = _content_sequence(document)
    return sum(1 for child in body if child.tag != qn("w:sectPr"))


def _write_log(log_state: BuildLogState) -> None:
    config.ensure_base_dirs()
    log_path = config.build_log_path(log_state.start_time)
    lines = [
        f"output_path: {log_state.output_path}",
        f"elapsed_sec: {log_state.elapsed_sec:.3f}"
        if log_state.elapsed_sec is not None
        else "elapsed_sec: unknown",
        f"block_count: {log_state.block_count}",
    ]
    if log_state.error:
        lines.append(f"error: {log_state.error}")
    log_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
