"""Identity-stable operations over a record's ordered resource list.

Every operation addresses items by their ``id`` and returns a new tuple;
positions are never used as keys.
"""

from __future__ import annotations

from collector.errors.exceptions import NotFoundError, ValidationError
from collector.models.enums import ResourceField
from collector.models.record import ResourceItem
from collector.services.id_generator import generate_id

Items = tuple[ResourceItem, ...]


def new_item(taken: set[str] | None = None) -> ResourceItem:
    """Create a blank item whose id does not collide with any in *taken*."""
    taken = taken or set()
    item_id = generate_id("res_")
    while item_id in taken:
        item_id = generate_id("res_")
    return ResourceItem(id=item_id)


def add(items: Items) -> tuple[Items, ResourceItem]:
    """Append a blank item and return the new list with the created item."""
    item = new_item({i.id for i in items})
    return (*items, item), item


def update(items: Items, item_id: str, field: str, value: str) -> Items:
    """Replace ``remark`` or ``link`` on the item with *item_id*."""
    try:
        sub_field = ResourceField(field)
    except ValueError:
        raise ValidationError(
            f"Unknown resource field '{field}'",
            details={"allowed": [f.value for f in ResourceField]},
        ) from None
    if not isinstance(value, str):
        raise ValidationError(
            f"Resource field '{sub_field}' expects a string",
            details={"field": sub_field.value, "type": type(value).__name__},
        )

    index = _index_of(items, item_id)
    updated = items[index].model_copy(update={sub_field.value: value})
    return (*items[:index], updated, *items[index + 1:])


def remove(items: Items, item_id: str) -> Items:
    """Delete the item with *item_id*. Removing the last item leaves an empty list."""
    index = _index_of(items, item_id)
    return (*items[:index], *items[index + 1:])


def reorder(items: Items, item_id: str, new_position: int) -> Items:
    """Move the item with *item_id* to *new_position*, clamped to the list bounds."""
    index = _index_of(items, item_id)
    rest = [*items[:index], *items[index + 1:]]
    position = max(0, min(new_position, len(items) - 1))
    rest.insert(position, items[index])
    return tuple(rest)


def find(items: Items, item_id: str) -> ResourceItem:
    return items[_index_of(items, item_id)]


def non_blank(items: Items) -> Items:
    """Items with a non-empty remark or link after trimming."""
    return tuple(i for i in items if not i.is_blank())


def _index_of(items: Items, item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    raise NotFoundError("ResourceItem", item_id)
