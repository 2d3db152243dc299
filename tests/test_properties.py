import unittest

from docx.oxml.ns import qn
from lxml import etree

from wmlbuild.attributes import (
    after,
    ascii,
    attr,
    before,
    eastAsia,
    fill,
    first_line,
    hAnsi,
    hanging,
    left,
    line,
    line_rule,
    right,
    top,
    val,
)
from wmlbuild.elements import (
    center,
    color_hex,
    format_number,
    w_b,
    w_color,
    w_highlight,
    w_i,
    w_ind,
    w_jc,
    w_pBdr,
    w_pPr,
    w_pStyle,
    w_r,
    w_rFonts,
    w_rPr,
    w_shd,
    w_spacing,
    w_sz,
    w_u,
)
from wmlbuild.errors import InvalidAttributeValueError, UnknownAttributeError, UnsupportedArgumentError
from wmlbuild.fragments import frags


def _tags(node: etree._Element) -> list[str]:
    return [etree.QName(child).localname for child in node]


def _xml(node: etree._Element) -> bytes:
    return etree.tostring(node)


def _w(node: etree._Element, name: str) -> str | None:
    return node.get(qn(f"w:{name}"))


class SpacingTests(unittest.TestCase):
    def test_numeric_attributes(self) -> None:
        spacing = w_spacing(before(240), after(150), line(360), line_rule("auto"))
        self.assertEqual(int(_w(spacing, "after")), 150)
        self.assertEqual(_w(spacing, "after"), "150")
        self.assertEqual(_w(spacing, "before"), "240")
        self.assertEqual(_w(spacing, "line"), "360")
        self.assertEqual(_w(spacing, "lineRule"), "auto")

    def test_numeric_values_are_decoded(self) -> None:
        self.assertEqual(_w(w_spacing(attr("after", "0150")), "after"), "150")
        self.assertEqual(_w(w_spacing(attr("after", "+20")), "after"), "20")

    def test_rejects_formatted_numbers(self) -> None:
        for value in ("1,500", "1.5", "", " 150", "١٥٠", "abc"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidAttributeValueError) as ctx:
                    w_spacing(attr("after", value))
                self.assertEqual(ctx.exception.element, "w:spacing")
                self.assertEqual(ctx.exception.name, "after")

    def test_unknown_attribute(self) -> None:
        with self.assertRaises(UnknownAttributeError) as ctx:
            w_spacing(attr("bogus", "1"))
        self.assertEqual(ctx.exception.element, "w:spacing")
        self.assertEqual(ctx.exception.name, "bogus")

    def test_invalid_line_rule(self) -> None:
        with self.assertRaises(InvalidAttributeValueError):
            w_spacing(line_rule("sometimes"))

    def test_rejects_bare_values(self) -> None:
        with self.assertRaises(UnsupportedArgumentError) as ctx:
            w_spacing("150")
        self.assertEqual(ctx.exception.element, "w:spacing")
        self.assertEqual(ctx.exception.kind, "str")

    def test_later_attribute_wins(self) -> None:
        self.assertEqual(_w(w_spacing(after(1), after(2)), "after"), "2")


class ShadingTests(unittest.TestCase):
    def test_fill_sets_clear_pattern(self) -> None:
        shd = w_shd(fill("3B82F6"))
        self.assertEqual(_w(shd, "fill"), "3B82F6")
        self.assertEqual(_w(shd, "val"), "clear")

    def test_explicit_pattern_kept(self) -> None:
        shd = w_shd(val("solid"), fill("000000"), attr("color", "auto"))
        self.assertEqual(_w(shd, "val"), "solid")
        self.assertEqual(_w(shd, "color"), "auto")

    def test_unknown_attribute(self) -> None:
        with self.assertRaises(UnknownAttributeError):
            w_shd(left(1))


class IndentationTests(unittest.TestCase):
    def test_attributes(self) -> None:
        ind = w_ind(left(720), right(-120), first_line(360), hanging(0))
        self.assertEqual(_w(ind, "left"), "720")
        self.assertEqual(_w(ind, "right"), "-120")
        self.assertEqual(_w(ind, "firstLine"), "360")
        self.assertEqual(_w(ind, "hanging"), "0")

    def test_unknown_attribute(self) -> None:
        with self.assertRaises(UnknownAttributeError) as ctx:
            w_ind(top(1))
        self.assertEqual(ctx.exception.element, "w:ind")


class ParagraphPropertiesTests(unittest.TestCase):
    def test_children_follow_schema_order(self) -> None:
        ppr = w_pPr(
            w_jc(center()),
            w_ind(left(10)),
            w_spacing(after(10)),
            w_shd(fill("EEEEEE")),
            w_pStyle("Heading1"),
            w_pBdr(top("000000:4")),
        )
        self.assertEqual(_tags(ppr), ["pStyle", "pBdr", "shd", "spacing", "ind", "jc"])

    def test_duplicate_slot_last_wins(self) -> None:
        first = w_spacing(after(1))
        second = w_spacing(after(2))
        ppr = w_pPr(first, w_jc("left"), second)
        self.assertEqual(len(ppr.findall(qn("w:spacing"))), 1)
        self.assertIs(ppr.find(qn("w:spacing")), second)
        self.assertEqual(_tags(ppr), ["spacing", "jc"])

    def test_attribute_shorthands(self) -> None:
        ppr = w_pPr(after(120), left(720), fill("FAFAFA"), val("Quote"), before(60))
        self.assertEqual(_tags(ppr), ["pStyle", "shd", "spacing", "ind"])
        spacing = ppr.find(qn("w:spacing"))
        self.assertEqual(_w(spacing, "after"), "120")
        self.assertEqual(_w(spacing, "before"), "60")
        self.assertEqual(_w(ppr.find(qn("w:ind")), "left"), "720")

    def test_fragments(self) -> None:
        ppr = w_pPr(frags(w_jc("right"), w_spacing(after(5))))
        self.assertEqual(_tags(ppr), ["spacing", "jc"])

    def test_unknown_attribute(self) -> None:
        with self.assertRaises(UnknownAttributeError) as ctx:
            w_pPr(ascii("Arial"))
        self.assertEqual(ctx.exception.element, "w:pPr")

    def test_unsupported(self) -> None:
        with self.assertRaises(UnsupportedArgumentError) as ctx:
            w_pPr(w_r())
        self.assertEqual(ctx.exception.element, "w:pPr")
        self.assertEqual(ctx.exception.kind, "w:r")


class SingleValueTests(unittest.TestCase):
    def test_attribute_and_bare_value_match(self) -> None:
        pairs = [
            (w_pStyle(val("Heading1")), w_pStyle("Heading1")),
            (w_jc(val("center")), w_jc("center")),
            (w_color(val("FF0000")), w_color("FF0000")),
            (w_highlight(val("yellow")), w_highlight("yellow")),
            (w_sz(val(24)), w_sz(24)),
            (w_u(val("double")), w_u("double")),
        ]
        for from_attr, from_bare in pairs:
            with self.subTest(tag=from_attr.tag):
                self.assertEqual(_xml(from_attr), _xml(from_bare))

    def test_values(self) -> None:
        self.assertEqual(_w(w_pStyle("Heading1"), "val"), "Heading1")
        self.assertEqual(_w(w_sz(24), "val"), "24")
        self.assertEqual(_w(w_color("FF0000"), "val"), "FF0000")

    def test_size_rejects_text_and_bool(self) -> None:
        with self.assertRaises(UnsupportedArgumentError):
            w_sz("24")
        with self.assertRaises(UnsupportedArgumentError) as ctx:
            w_sz(True)
        self.assertEqual(ctx.exception.kind, "bool")

    def test_size_rejects_non_numeric_attribute(self) -> None:
        with self.assertRaises(InvalidAttributeValueError):
            w_sz(val("big"))

    def test_justification_validated(self) -> None:
        with self.assertRaises(InvalidAttributeValueError):
            w_jc("middle")

    def test_unknown_attribute_name(self) -> None:
        with self.assertRaises(UnknownAttributeError) as ctx:
            w_pStyle(fill("x"))
        self.assertEqual(ctx.exception.element, "w:pStyle")
        with self.assertRaises(UnknownAttributeError):
            w_color(after(1))

    def test_underline_default(self) -> None:
        self.assertEqual(_w(w_u(), "val"), "single")

    def test_underline_validated(self) -> None:
        with self.assertRaises(InvalidAttributeValueError):
            w_u("squiggly")


class FontTests(unittest.TestCase):
    def test_bare_name_sets_ascii_and_hansi(self) -> None:
        fonts = w_rFonts("Arial")
        self.assertEqual(_w(fonts, "ascii"), "Arial")
        self.assertEqual(_w(fonts, "hAnsi"), "Arial")
        self.assertIsNone(_w(fonts, "eastAsia"))
        self.assertEqual(_xml(fonts), _xml(w_rFonts(val("Arial"))))

    def test_individual_slots(self) -> None:
        fonts = w_rFonts(ascii("Consolas"), hAnsi("Courier"), eastAsia("SimSun"))
        self.assertEqual(_w(fonts, "ascii"), "Consolas")
        self.assertEqual(_w(fonts, "hAnsi"), "Courier")
        self.assertEqual(_w(fonts, "eastAsia"), "SimSun")

    def test_unknown_attribute(self) -> None:
        with self.assertRaises(UnknownAttributeError):
            w_rFonts(attr("cs", "Arial"))


class RunPropertiesTests(unittest.TestCase):
    def test_children_follow_schema_order(self) -> None:
        rpr = w_rPr(
            w_shd(fill("EEEEEE")),
            w_u(),
            w_highlight("yellow"),
            w_sz(24),
            w_color("FF0000"),
            w_i(),
            w_b(),
            w_rFonts("Arial"),
        )
        self.assertEqual(
            _tags(rpr), ["rFonts", "b", "i", "color", "sz", "highlight", "u", "shd"]
        )

    def test_duplicate_slot_last_wins(self) -> None:
        rpr = w_rPr(w_sz(20), w_b(), w_sz(28))
        self.assertEqual(_tags(rpr), ["b", "sz"])
        self.assertEqual(_w(rpr.find(qn("w:sz")), "val"), "28")

    def test_attribute_shorthands(self) -> None:
        rpr = w_rPr(fill("FFFF00"), w_b(), ascii("Arial"))
        self.assertEqual(_tags(rpr), ["rFonts", "b", "shd"])

    def test_unknown_attribute(self) -> None:
        with self.assertRaises(UnknownAttributeError) as ctx:
            w_rPr(val("x"))
        self.assertEqual(ctx.exception.element, "w:rPr")

    def test_unsupported(self) -> None:
        with self.assertRaises(UnsupportedArgumentError) as ctx:
            w_rPr(w_jc("center"))
        self.assertEqual(ctx.exception.kind, "w:jc")

    def test_bold_and_italic_markers(self) -> None:
        self.assertEqual(w_b().tag, qn("w:b"))
        self.assertEqual(w_i().tag, qn("w:i"))
        self.assertEqual(len(w_b().attrib), 0)


class ValueHelperTests(unittest.TestCase):
    def test_center(self) -> None:
        self.assertEqual(center(), "center")
        self.assertEqual(_w(w_jc(center()), "val"), "center")

    def test_color_hex(self) -> None:
        self.assertEqual(color_hex("#3b82f6"), "3B82F6")
        self.assertEqual(color_hex("AABBCC"), "AABBCC")

    def test_format_number(self) -> None:
        self.assertEqual(format_number(1234567), "1,234,567")
        self.assertEqual(format_number(-1000), "-1,000")
        self.assertEqual(format_number(12), "12")


if __name__ == "__main__":
    unittest.main()
