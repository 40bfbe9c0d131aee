"""Shared fixtures for eztag tests."""

from __future__ import annotations

import pytest

from eztag.config import reset_parse_config
from eztag.registry import CustomTagDefinition, ExpansionNode, TagRegistry, TagRegistryBuilder


@pytest.fixture(autouse=True)
def _default_config():
    """Every test starts and ends with the default ParseConfig."""
    reset_parse_config()
    yield
    reset_parse_config()


@pytest.fixture
def registry() -> TagRegistry:
    """Registry with a few representative custom tags.

    - ``note``: single ``<aside>``
    - ``custom``: ``outer > inner`` split on a blank line
    - ``callout``: ``<div class="box">`` with a ``<p>`` body
    - ``icon``: void custom tag expanding to ``<i class="icon">``
    """
    return (
        TagRegistryBuilder()
        .register(CustomTagDefinition("note", ExpansionNode("aside")))
        .register(
            CustomTagDefinition(
                "custom",
                ExpansionNode("outer", children=(ExpansionNode("inner"),)),
                delimiters=("\n\n",),
            )
        )
        .register(
            CustomTagDefinition(
                "callout",
                ExpansionNode(
                    "div",
                    attributes=(("class", "box"),),
                    children=(ExpansionNode("p"),),
                ),
                delimiters=("\n\n",),
            )
        )
        .register(
            CustomTagDefinition(
                "icon",
                ExpansionNode("i", attributes=(("class", "icon"),)),
                void=True,
            )
        )
        .build()
    )
