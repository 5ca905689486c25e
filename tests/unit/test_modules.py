"""Tests for module display metadata."""

import pytest

from src.gatekeeper.core.modules import DEFAULT_MODULE_ICON, module_icon, module_name

pytestmark = pytest.mark.unit


def test_known_module():
    assert module_name("HR") == "Human Resources"
    assert module_icon("HR") == "users"


def test_unknown_module_falls_back():
    assert module_name("FLEET") == "FLEET"
    assert module_icon("FLEET") == DEFAULT_MODULE_ICON == "circle"
