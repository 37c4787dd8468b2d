"""Menu data models.

A menu is an ordered mapping from category name to the items served in that
category. Plain ``dict`` insertion order is the category order.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

HOT_TRADITIONAL_ENTREES = "Hot Traditional Station - Entrees"
HOT_TRADITIONAL_SIDES = "Hot Traditional Station - Sides"
GENERAL_CATEGORY = "General"


class MenuItem(BaseModel):
    """Menu item model."""

    name: str = Field(..., description="Item name")
    healthy: bool = Field(default=False, description="Whether the item is marked healthy")


Menu = dict[str, list[MenuItem]]


def menu_from_blocks(blocks: Iterable[Any]) -> Menu:
    """Build a menu from decoded category blocks.

    Blocks with the same category name are concatenated in feed order.

    Args:
        blocks: Objects exposing ``category`` and ``items`` (each with ``item`` and ``healthy``)

    Returns:
        Menu mapping category name to its items
    """
    menu: Menu = {}
    for block in blocks:
        items = menu.setdefault(block.category, [])
        items.extend(MenuItem(name=entry.item, healthy=entry.healthy) for entry in block.items)
    return menu


def menu_is_empty(menu: Menu | None) -> bool:
    """Whether a menu has no items in any category."""
    if not menu:
        return True
    return all(not items for items in menu.values())


def menu_iterable(menu: Menu | None) -> list[tuple[str, list[str]]]:
    """Flatten a menu into ``(category, [item names])`` pairs.

    Args:
        menu: Menu to flatten, may be None

    Returns:
        One pair per category in mapping order, empty list for no menu
    """
    if menu is None:
        return []
    return [(category, [item.name for item in items]) for category, items in menu.items()]


def _category_rank(category: str) -> int:
    if category == HOT_TRADITIONAL_ENTREES:
        return 0
    if category == HOT_TRADITIONAL_SIDES:
        return 1
    return 2


def sorted_menu(menu: Menu) -> list[tuple[str, list[MenuItem]]]:
    """Order menu categories for display.

    The hot traditional entrees category is pinned first and the hot
    traditional sides category second. Every other category compares equal,
    so the stable sort leaves them in their original relative order.

    Args:
        menu: Menu to order

    Returns:
        List of ``(category, items)`` pairs
    """
    return sorted(menu.items(), key=lambda entry: _category_rank(entry[0]))


def menu_text(menu: Menu) -> str:
    """Render a menu as ``Category: item, item`` lines for text search."""
    return "\n".join(
        f"{category}: {', '.join(item.name for item in items)}" for category, items in menu.items()
    )
