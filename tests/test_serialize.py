"""Tests for persisted-value encoding and the legacy option-string coercion."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from playerhub.serialize import coerce, deserialize, parse_number, serialize

json_values = st.recursive(
    st.none()
    | st.booleans()
    | st.integers()
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(max_size=12),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=6), children, max_size=4),
    max_leaves=12,
)


class TestSerialize:
    def test_type_tag_is_json(self):
        assert serialize(True) == "true"
        assert serialize(90) == "90"
        assert serialize("seven") == '"seven"'
        assert serialize([0.5, 1]) == "[0.5,1]"
        assert serialize({"name": "bekle"}) == '{"name":"bekle"}'

    @given(json_values)
    def test_deserialize_restores_natural_type(self, value):
        assert deserialize(serialize(value)) == value


class TestDeserialize:
    def test_legacy_bare_string_kept_verbatim(self):
        assert deserialize("beelden") == "beelden"

    def test_non_string_passthrough(self):
        assert deserialize(5) == 5
        assert deserialize(None) is None

    def test_booleans_and_numbers(self):
        assert deserialize("false") is False
        assert deserialize("1.5") == 1.5
        assert deserialize("[0.5,1,2]") == [0.5, 1, 2]


class TestParseNumber:
    def test_integers_stay_integers(self):
        assert parse_number("10") == 10
        assert isinstance(parse_number("10"), int)

    def test_decimals_and_exponents_are_floats(self):
        assert parse_number("1.0") == 1.0
        assert isinstance(parse_number("1.0"), float)
        assert parse_number("1e3") == 1000.0
        assert parse_number(".5") == 0.5
        assert parse_number("-2") == -2

    def test_not_a_number(self):
        assert parse_number("") is None
        assert parse_number("abc") is None
        assert parse_number("1.2.3") is None


class TestCoerce:
    def test_short_booleans_any_case(self):
        assert coerce("true") is True
        assert coerce("FALSE") is False
        assert coerce("True") is True

    def test_short_numeric_strings(self):
        assert coerce("50") == 50
        assert coerce("1.5") == 1.5

    def test_long_strings_untouched(self):
        assert coerce("100000") == "100000"
        assert coerce("movie.mp4") == "movie.mp4"

    def test_other_values_untouched(self):
        assert coerce("seven") == "seven"
        assert coerce(5) == 5
        assert coerce(None) is None
        items = [{"file": "a.mp4"}]
        assert coerce(items) is items
