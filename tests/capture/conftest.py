"""Fixtures for capture tests."""

import pytest
from fakes import FakeElement, FakeStyleHost


@pytest.fixture
def button() -> FakeElement:
    return FakeElement(
        selector=".btn",
        tag="button",
        styles={
            "backgroundColor": "rgb(0, 0, 0)",
            "color": "rgb(255, 255, 255)",
            "boxShadow": "none",
            "cursor": "pointer",
        },
        matches={".btn"},
    )


@pytest.fixture
def plain_div() -> FakeElement:
    return FakeElement(
        selector="div.note",
        tag="div",
        styles={"color": "rgb(0, 0, 0)"},
        matches={"div.note", ".note"},
    )


@pytest.fixture
def host(button, plain_div) -> FakeStyleHost:
    return FakeStyleHost(elements=[button, plain_div])
