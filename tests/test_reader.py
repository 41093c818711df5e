"""Tests for the Reader layer: line classification and value parsing."""

import math

import pytest

from tscn_core.reader import (
    MAX_NESTING,
    LineKind,
    classify_line,
    parse_attributes,
    parse_value,
    split_header,
)
from tscn_core.values import (
    Vector2,
    VBool,
    VCurve,
    VExtResource,
    VFloat,
    VFloatArray,
    VInt,
    VIntArray,
    VList,
    VMap,
    VMapArray,
    VRaw,
    VRect2,
    VStr,
    VSubResource,
    VVector2,
    VVector2Array,
)

ALL_VALUE_TYPES = (
    VBool, VCurve, VExtResource, VFloat, VFloatArray, VInt, VIntArray, VList,
    VMap, VMapArray, VRaw, VRect2, VStr, VSubResource, VVector2, VVector2Array,
)


# ---------------------------------------------------------------------------
# classify_line
# ---------------------------------------------------------------------------

class TestClassifyLine:
    def test_blank(self):
        assert classify_line("") is None
        assert classify_line("   \t") is None

    def test_header(self):
        line = classify_line('[node name="A" type="Node2D"]')
        assert line.kind == LineKind.HEADER
        assert line.rhs == 'node name="A" type="Node2D"'

    def test_assignment(self):
        line = classify_line("position = Vector2( 1, 2 )")
        assert line.kind == LineKind.ASSIGNMENT
        assert line.key == "position"
        assert line.rhs == "Vector2( 1, 2 )"

    def test_assignment_splits_on_first_equals(self):
        line = classify_line('text = "a = b"')
        assert line.key == "text"
        assert line.rhs == '"a = b"'

    def test_assignment_with_path_key(self):
        line = classify_line('tracks/0/type = "value"')
        assert line.key == "tracks/0/type"

    def test_continuation_with_comma(self):
        line = classify_line('"times": PoolRealArray( 0, 1 ),')
        assert line.kind == LineKind.CONTINUATION
        assert line.key == "times"
        assert line.rhs == "PoolRealArray( 0, 1 )"

    def test_continuation_last_entry(self):
        line = classify_line('"speed": 5.0')
        assert line.kind == LineKind.CONTINUATION
        assert line.rhs == "5.0"

    def test_continuation_value_with_colon(self):
        line = classify_line('"path": "res://a.png",')
        assert line.key == "path"
        assert line.rhs == '"res://a.png"'

    @pytest.mark.parametrize("text", ["}", "}]", "} ]", "},"])
    def test_closer(self, text):
        assert classify_line(text).kind == LineKind.CLOSER

    def test_separator(self):
        assert classify_line("}, {").kind == LineKind.SEPARATOR

    def test_unrecognised_line_is_skipped(self):
        assert classify_line("just some words") is None


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------

class TestSplitHeader:
    def test_scene(self):
        assert split_header("[gd_scene load_steps=21 format=2]") == ("gd_scene", "load_steps=21 format=2")

    def test_resource_with_type(self):
        assert split_header('[gd_resource type="TileSet" load_steps=7 format=2]') == (
            "gd_resource",
            'type="TileSet" load_steps=7 format=2',
        )

    def test_bare(self):
        assert split_header("[resource]") == ("resource", "")

    def test_without_brackets(self):
        assert split_header('node name="A"') == ("node", 'name="A"')

    def test_empty(self):
        assert split_header("[]") == ("", "")


class TestParseAttributes:
    def test_quoted_with_spaces(self):
        attrs = parse_attributes('name="Simple Background" type="Sprite" parent="."')
        assert attrs == [
            ("name", VStr("Simple Background")),
            ("type", VStr("Sprite")),
            ("parent", VStr(".")),
        ]

    def test_numbers_and_references(self):
        attrs = parse_attributes('name="Doggo" id=3 instance=ExtResource( 5 )')
        assert attrs[1] == ("id", VInt(3))
        assert attrs[2] == ("instance", VExtResource(5))

    def test_array_value(self):
        attrs = parse_attributes('groups=[ "a", "b" ]')
        assert attrs == [("groups", VList([VStr("a"), VStr("b")]))]

    def test_token_without_equals_dropped(self):
        assert parse_attributes("flag id=1") == [("id", VInt(1))]


# ---------------------------------------------------------------------------
# parse_value
# ---------------------------------------------------------------------------

class TestParseValueScalars:
    def test_string(self):
        assert parse_value('"hello"') == VStr("hello")

    def test_string_escapes(self):
        assert parse_value(r'"a \"b\"\nc"') == VStr('a "b"\nc')

    def test_quoted_keyword_stays_string(self):
        assert parse_value('"true"') == VStr("true")
        assert parse_value('"42"') == VStr("42")

    def test_two_strings_are_not_one(self):
        assert parse_value('"a", "b"') == VRaw('"a", "b"')

    def test_bool(self):
        assert parse_value("true") == VBool(True)
        assert parse_value("false") == VBool(False)

    def test_int(self):
        assert parse_value("-42") == VInt(-42)
        assert parse_value("7") == VInt(7)

    def test_float(self):
        assert parse_value("3.5") == VFloat(3.5)
        assert parse_value("1e-05") == VFloat(1e-05)
        assert parse_value("-0.25") == VFloat(-0.25)

    def test_float_specials(self):
        assert parse_value("inf") == VFloat(math.inf)
        assert math.isnan(parse_value("nan").value)

    def test_raw_fallback_keeps_text(self):
        assert parse_value("Color( 1, 1, 1, 1 )") == VRaw("Color( 1, 1, 1, 1 )")
        assert parse_value("null") == VRaw("null")
        assert parse_value("") == VRaw("")


class TestParseValueCalls:
    def test_vector2(self):
        assert parse_value("Vector2( 1.5, -2 )") == VVector2(Vector2(1.5, -2.0))

    def test_vector2_exponent(self):
        assert parse_value("Vector2( 1e-05, 0 )") == VVector2(Vector2(1e-05, 0.0))

    def test_vector_pool(self):
        assert parse_value("PoolVector2Array( 0, 0, 10, 20 )") == VVector2Array(
            [Vector2(0.0, 0.0), Vector2(10.0, 20.0)]
        )

    def test_vector_pool_odd_tail_dropped(self):
        assert parse_value("PoolVector2Array( 1, 2, 3 )") == VVector2Array([Vector2(1.0, 2.0)])

    def test_vector_pool_empty(self):
        assert parse_value("PoolVector2Array(  )") == VVector2Array([])

    def test_rect(self):
        assert parse_value("Rect2( 0, 0, 64, 32 )") == VRect2(Vector2(0.0, 0.0), Vector2(64.0, 32.0))

    def test_rect_wrong_arity(self):
        assert parse_value("Rect2( 1, 2 )") == VRaw("Rect2( 1, 2 )")

    def test_int_pool(self):
        assert parse_value("PoolIntArray( 1, -2, 3 )") == VIntArray([1, -2, 3])

    def test_int_pool_bad_element(self):
        assert parse_value("PoolIntArray( 1.5 )") == VRaw("PoolIntArray( 1.5 )")

    def test_real_pool(self):
        assert parse_value("PoolRealArray( 0, 0.5 )") == VFloatArray([0.0, 0.5])

    def test_sub_resource(self):
        assert parse_value("SubResource( 7 )") == VSubResource(7)

    def test_ext_resource(self):
        assert parse_value("ExtResource( 3 )") == VExtResource(3)
        assert parse_value("ExtResource(3)") == VExtResource(3)

    def test_unterminated_call(self):
        assert parse_value("ExtResource( 3") == VRaw("ExtResource( 3")


class TestParseValueContainers:
    def test_map_seed(self):
        assert parse_value("{") == VMap({})

    def test_map_array_seed(self):
        assert parse_value("[{") == VMapArray([{}])
        assert parse_value("[ {") == VMapArray([{}])

    def test_generic_list(self):
        assert parse_value("[ 1, \"two\", Vector2( 3, 4 ) ]") == VList(
            [VInt(1), VStr("two"), VVector2(Vector2(3.0, 4.0))]
        )

    def test_empty_list(self):
        assert parse_value("[  ]") == VList([])

    def test_curve_array(self):
        text = "[ Vector2( 0, 0 ), 0.0, 2.0, 0, 0, Vector2( 1, 1 ), -1.5, 0, 0, 0 ]"
        value = parse_value(text, "Curve")
        assert isinstance(value, VCurve)
        points = value.value.points
        assert len(points) == 2
        assert points[0].pos == Vector2(0.0, 0.0)
        assert points[0].right_tangent == 2.0
        assert points[1].left_tangent == -1.5

    def test_curve_requires_curve_type(self):
        text = "[ Vector2( 0, 0 ), 0.0, 0.0, 0, 0 ]"
        assert isinstance(parse_value(text, "Gradient"), VList)

    def test_curve_skips_malformed_group(self):
        text = '[ "x", 0.0, 0.0, 0, 0, Vector2( 1, 1 ), 0.0, 0.0, 0, 0 ]'
        value = parse_value(text, "Curve")
        assert [p.pos for p in value.value.points] == [Vector2(1.0, 1.0)]

    def test_curve_custom_types(self):
        text = "[ Vector2( 0, 0 ), 0.0, 0.0, 0, 0 ]"
        value = parse_value(text, "MyCurve", frozenset({"MyCurve"}))
        assert isinstance(value, VCurve)


@pytest.mark.parametrize(
    "text",
    [
        "", " ", "[", "]", "(", '"', '"\\', "Vector2(", "Vector2( a, b )", "PoolIntArray( x )",
        "PoolRealArray( 1,, 2 )", "[ [ [", "{ }", "}{", "SubResource( -1 )", "1.2.3", "--1",
        "Rect2( 1, 2, 3, z )", "[ Vector2( 0, 0 ) ]", "\x00", "ünïcödé",
    ],
)
def test_parse_value_is_total(text):
    assert isinstance(parse_value(text), ALL_VALUE_TYPES)
    assert isinstance(parse_value(text, "Curve"), ALL_VALUE_TYPES)


def test_deeply_nested_list_is_total():
    text = "[" * 600 + "]" * 600
    assert isinstance(parse_value(text), VList)
    assert isinstance(parse_value(text, "Curve"), ALL_VALUE_TYPES)


def test_nesting_past_limit_kept_raw():
    value = parse_value("[" * (MAX_NESTING + 2) + "]" * (MAX_NESTING + 2))
    for _ in range(MAX_NESTING + 1):
        assert isinstance(value, VList)
        value = value.items[0]
    assert value == VRaw("[]")


def test_parse_value_is_deterministic():
    text = "PoolVector2Array( 1, 2, 3, 4 )"
    assert parse_value(text) == parse_value(text)
