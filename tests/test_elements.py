"""Tests for the element vocabulary: config defaults, rendering, fragments."""

import re
import uuid
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from customid.core.elements import (
    DateTimeElement,
    ElementType,
    FixedTextElement,
    GuidElement,
    Random6DigitElement,
    Random9DigitElement,
    Random20BitElement,
    Random32BitElement,
    RenderContext,
    SequenceElement,
    new_element,
    parse_element,
)
from customid.core.pattern import DIGIT, HEX, CharRunNode, LiteralNode, UuidNode
from customid.core.random_source import SeededRandomSource

NOW = datetime(2024, 3, 7, 12, 0, 0, tzinfo=UTC)


def _ctx(counter_value: int = 1, seed: int = 0) -> RenderContext:
    return RenderContext(
        counter_value=counter_value,
        random_source=SeededRandomSource(seed),
        now=NOW,
    )


class TestParseElement:
    def test_camel_case_record(self):
        el = parse_element(
            {"elementType": "FIXED_TEXT", "config": {"value": "INV-"}, "sortOrder": 2}
        )
        assert isinstance(el, FixedTextElement)
        assert el.config.value == "INV-"
        assert el.sort_order == 2

    def test_snake_case_record(self):
        el = parse_element(
            {"element_type": "SEQUENCE", "config": {"padding": 3}, "sort_order": 0}
        )
        assert isinstance(el, SequenceElement)
        assert el.config.padding == 3

    def test_every_type_dispatches(self):
        expected = {
            "FIXED_TEXT": FixedTextElement,
            "RANDOM_20BIT": Random20BitElement,
            "RANDOM_32BIT": Random32BitElement,
            "RANDOM_6DIGIT": Random6DigitElement,
            "RANDOM_9DIGIT": Random9DigitElement,
            "GUID": GuidElement,
            "DATETIME": DateTimeElement,
            "SEQUENCE": SequenceElement,
        }
        for type_name, cls in expected.items():
            el = parse_element({"elementType": type_name, "config": {}, "sortOrder": 0})
            assert type(el) is cls

    def test_unknown_type_raises(self):
        with pytest.raises(ValidationError):
            parse_element({"elementType": "BARCODE", "config": {}, "sortOrder": 0})

    def test_missing_type_raises(self):
        with pytest.raises(ValidationError):
            parse_element({"config": {}, "sortOrder": 0})

    def test_dump_uses_persisted_shape(self):
        el = parse_element(
            {"elementType": "SEQUENCE", "config": {"padding": 4}, "sortOrder": 1}
        )
        assert el.model_dump(by_alias=True, mode="json") == {
            "elementType": "SEQUENCE",
            "config": {"padding": 4},
            "sortOrder": 1,
        }


class TestConfigDefaults:
    def test_missing_config(self):
        el = parse_element({"elementType": "SEQUENCE", "sortOrder": 0})
        assert el.config.padding == 1

    def test_null_config(self):
        el = parse_element({"elementType": "DATETIME", "config": None, "sortOrder": 0})
        assert el.config.format == "YYYY"

    def test_config_not_a_mapping(self):
        el = parse_element({"elementType": "FIXED_TEXT", "config": "oops", "sortOrder": 0})
        assert el.config.value == ""

    def test_fixed_text_wrong_type(self):
        el = FixedTextElement(sort_order=0, config={"value": 123})
        assert el.config.value == ""

    def test_datetime_empty_format(self):
        el = DateTimeElement(sort_order=0, config={"format": ""})
        assert el.config.format == "YYYY"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (4, 4),
            (0, 1),
            (-5, 1),
            (42, 10),
            ("4", 4),
            ("abc", 1),
            (3.0, 3),
            (2.5, 1),
            (True, 1),
            (None, 1),
        ],
    )
    def test_padding_is_clamped(self, raw, expected):
        el = SequenceElement(sort_order=0, config={"padding": raw})
        assert el.config.padding == expected

    def test_extra_config_keys_ignored(self):
        el = parse_element(
            {
                "elementType": "SEQUENCE",
                "config": {"padding": 3, "value": "x"},
                "sortOrder": 0,
            }
        )
        assert el.config.padding == 3
        assert "value" not in el.config.model_dump()


class TestRender:
    def test_fixed_text(self):
        el = FixedTextElement(sort_order=0, config={"value": "A.B*"})
        assert el.render(_ctx()) == "A.B*"

    def test_random_20bit(self):
        for seed in range(50):
            out = Random20BitElement(sort_order=0).render(_ctx(seed=seed))
            assert re.fullmatch(r"[0-9A-F]{5}", out)

    def test_random_32bit(self):
        for seed in range(50):
            out = Random32BitElement(sort_order=0).render(_ctx(seed=seed))
            assert re.fullmatch(r"[0-9A-F]{8}", out)

    def test_random_6digit_range(self):
        for seed in range(50):
            out = Random6DigitElement(sort_order=0).render(_ctx(seed=seed))
            assert 100_000 <= int(out) <= 999_999

    def test_random_9digit_range(self):
        for seed in range(50):
            out = Random9DigitElement(sort_order=0).render(_ctx(seed=seed))
            assert 100_000_000 <= int(out) <= 999_999_999

    def test_guid_is_version_4(self):
        out = GuidElement(sort_order=0).render(_ctx())
        parsed = uuid.UUID(out)
        assert parsed.version == 4
        assert str(parsed) == out

    def test_datetime(self):
        el = DateTimeElement(sort_order=0, config={"format": "YYYY-MM-DD"})
        assert el.render(_ctx()) == "2024-03-07"

    def test_datetime_default_year(self):
        assert DateTimeElement(sort_order=0).render(_ctx()) == "2024"

    def test_sequence_padding(self):
        el = SequenceElement(sort_order=0, config={"padding": 4})
        assert el.render(_ctx(counter_value=7)) == "0007"

    def test_sequence_longer_than_padding(self):
        el = SequenceElement(sort_order=0, config={"padding": 2})
        assert el.render(_ctx(counter_value=12345)) == "12345"

    def test_sequence_negative_counter_clamped(self):
        el = SequenceElement(sort_order=0, config={"padding": 3})
        assert el.render(_ctx(counter_value=-4)) == "000"


class TestFragments:
    def test_fixed_text(self):
        el = FixedTextElement(sort_order=0, config={"value": "INV-"})
        assert el.fragments() == [LiteralNode("INV-")]

    def test_empty_fixed_text_contributes_nothing(self):
        assert FixedTextElement(sort_order=0).fragments() == []

    def test_random_types(self):
        assert Random20BitElement(sort_order=0).fragments() == [CharRunNode(HEX, 5, 5)]
        assert Random32BitElement(sort_order=0).fragments() == [CharRunNode(HEX, 8, 8)]
        assert Random6DigitElement(sort_order=0).fragments() == [CharRunNode(DIGIT, 6, 6)]
        assert Random9DigitElement(sort_order=0).fragments() == [CharRunNode(DIGIT, 9, 9)]

    def test_guid(self):
        assert GuidElement(sort_order=0).fragments() == [UuidNode()]

    def test_datetime(self):
        el = DateTimeElement(sort_order=0, config={"format": "YYYY/MM"})
        assert el.fragments() == [
            CharRunNode(DIGIT, 4, 4),
            LiteralNode("/"),
            CharRunNode(DIGIT, 2, 2),
        ]

    def test_sequence_is_open_ended(self):
        el = SequenceElement(sort_order=0, config={"padding": 4})
        assert el.fragments() == [CharRunNode(DIGIT, 4, None)]


class TestNewElement:
    def test_sequence_starts_with_padding_4(self):
        el = new_element(ElementType.SEQUENCE, 3)
        assert isinstance(el, SequenceElement)
        assert el.config.padding == 4
        assert el.sort_order == 3

    def test_datetime_starts_with_year(self):
        el = new_element("DATETIME", 0)
        assert el.config.format == "YYYY"

    def test_plain_types(self):
        el = new_element("RANDOM_6DIGIT", 1)
        assert isinstance(el, Random6DigitElement)

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            new_element("NOPE", 0)
