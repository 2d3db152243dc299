from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _ensure_project_root() -> None:
    if str(ROOT) not in sys.path:
        sys.path.insert(0, str(ROOT))


def _heading(text: str):
    from wmlbuild.attributes import after, before, bottom, fill
    from wmlbuild.elements import (
        center,
        color_hex,
        w_b,
        w_color,
        w_jc,
        w_p,
        w_pBdr,
        w_pPr,
        w_r,
        w_rPr,
        w_shd,
        w_spacing,
        w_sz,
    )

    return w_p(
        w_pPr(
            w_spacing(before(240), after(120)),
            w_shd(fill("EFF6FF")),
            w_pBdr(bottom(color_hex("#3b82f6"), 12)),
            w_jc(center()),
        ),
        w_r(w_rPr(w_b(), w_sz(32), w_color("1E3A8A")), text),
    )


def _body():
    from wmlbuild.attributes import ascii, eastAsia, hAnsi, left, right, val
    from wmlbuild.elements import (
        format_number,
        w_br,
        w_highlight,
        w_i,
        w_ind,
        w_p,
        w_pPr,
        w_pStyle,
        w_r,
        w_rFonts,
        w_rPr,
        w_u,
    )
    from wmlbuild.fragments import frags

    group = frags()
    group.add(
        w_p(
            "Plain text becomes a run. ",
            w_r(w_rPr(w_i()), "Italic follows."),
            w_pPr(w_pStyle(val("Normal")), w_ind(left(720), right(360))),
        )
    )
    group.add(
        w_p(
            w_r(
                w_rPr(w_rFonts(ascii("Consolas"), hAnsi("Consolas"), eastAsia("SimSun")), w_u()),
                f"Total: {format_number(1234567)}",
            ),
            w_r(w_rPr(w_highlight("yellow")), " highlighted"),
        )
    )
    group.add(w_p(w_r(w_br("page"))))
    group.add(w_p("Second page."))
    return group


def main() -> None:
    _ensure_project_root()
    from wmlbuild import config
    from wmlbuild.document import add_to, new_document, save_document

    doc = new_document()
    add_to(doc, _heading("Sample document"), _body())
    path = save_document(doc, config.OUTPUT_DIR / "sample.docx")
    config.cleanup_logs()
    print(f"document written to {path}")


if __name__ == "__main__":
    main()
