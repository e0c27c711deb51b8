"""Tests for natural-language state summaries."""

import pytest

from stylematrix.capture.models import PropertyChange, StateRecord
from stylematrix.capture.summary import describe_change, generate_state_summary


class TestDescribeChange:
    @pytest.mark.parametrize(
        ("prop", "change", "expected"),
        [
            (
                "backgroundColor",
                PropertyChange("rgb(0, 0, 0)", "rgb(255, 0, 0)"),
                "background changes from rgb(0, 0, 0) to rgb(255, 0, 0)",
            ),
            ("color", PropertyChange("red", "blue"), "text color changes to blue"),
            ("transform", PropertyChange(None, "scale(1.05)"), "element scales"),
            ("transform", PropertyChange(None, "translateY(-2px)"), "element moves"),
            ("transform", PropertyChange(None, "rotate(3deg)"), "transform: rotate(3deg)"),
            ("opacity", PropertyChange("1", "0.8"), "opacity changes to 0.8"),
            ("boxShadow", PropertyChange(None, "0 2px 4px black"), "shadow appears/changes"),
            ("boxShadow", PropertyChange("0 2px 4px black", None), "shadow removed"),
            ("borderColor", PropertyChange("red", "blue"), "border color changes to blue"),
            ("outline", PropertyChange(None, "2px solid blue"), "focus ring appears"),
            ("outlineColor", PropertyChange(None, "blue"), "focus ring appears"),
            ("fontWeight", PropertyChange("400", "700"), "fontWeight: 700"),
        ],
    )
    def test_phrasing_table(self, prop, change, expected) -> None:
        assert describe_change(prop, change) == expected


class TestGenerateStateSummary:
    """Tests for generate_state_summary."""

    def test_one_line_per_state(self) -> None:
        record = StateRecord(
            selector=".btn",
            states={
                "default": {"color": "red", "opacity": "1"},
                "hover": {"color": "blue", "opacity": "0.8"},
                "focus": {"color": "red", "opacity": "1"},
            },
        )

        summary = generate_state_summary(record)

        assert summary.ok
        assert summary.has_interactive_states
        assert summary.description("hover") == "text color changes to blue, opacity changes to 0.8"
        assert "focus" not in summary.state_descriptions
        assert [(c.state, c.property) for c in summary.key_changes] == [
            ("hover", "color"),
            ("hover", "opacity"),
        ]

    def test_default_only_record(self) -> None:
        summary = generate_state_summary(
            StateRecord(selector=".btn", states={"default": {"color": "red"}})
        )

        assert summary.ok
        assert summary.has_interactive_states is False

    def test_missing_default_compares_against_empty(self) -> None:
        summary = generate_state_summary({"selector": ".btn", "states": {"hover": {"color": "blue"}}})

        assert summary.description("hover") == "text color changes to blue"

    @pytest.mark.parametrize("bad", [None, {}, {"states": "hover"}, "default"])
    def test_invalid_state_data(self, bad) -> None:
        summary = generate_state_summary(bad)

        assert summary.ok is False
        assert summary.to_dict() == {"ok": False, "error": "Invalid state data"}

    def test_to_dict(self) -> None:
        record = StateRecord(
            selector=".btn",
            states={"default": {}, "hover": {"boxShadow": "0 0 4px red"}},
        )

        data = generate_state_summary(record).to_dict()

        assert data["selector"] == ".btn"
        assert data["state_descriptions"] == {"hover": "shadow appears/changes"}
        assert data["key_changes"] == [
            {"state": "hover", "property": "boxShadow", "from": None, "to": "0 0 4px red"}
        ]
