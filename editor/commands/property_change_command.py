# file: editor/commands/property_change_command.py

import logging
from collections.abc import MutableSequence, Sequence
from typing import Any, Callable, List, Optional

from editor.commands.base_command import BaseCommand, MergeableCommand
from editor.event_bus import EventBus
from editor.exceptions import PropertyPathError

# Time window for coalescing rapid property changes (milliseconds)
COALESCE_WINDOW_MS = 300

PROPERTY_UPDATED = "entity:propertyUpdated"

TRANSFORM_PROPERTIES = ("position", "rotation", "scale")
AXES = {"x": 0, "y": 1, "z": 2}

_DISPLAY_PREFIXES = (
    ("position.", "Position "),
    ("rotation.", "Rotation "),
    ("scale.", "Scale "),
    ("camera.", "Camera "),
    ("material.", "Material "),
)


class PropertyChangeCommand(MergeableCommand):
    """
    Sets one property of a scene entity, e.g. "position.x" or
    "camera.field_of_view".

    Property paths are dotted. Transform paths ("position", "rotation",
    "scale" followed by x/y/z) address the entity's transform vectors.
    When the entity exposes get_component(), the first segment of a longer
    path names a component. Any other segment is an attribute, or a list
    index when it is a number.

    Consecutive changes to the same entity property within
    COALESCE_WINDOW_MS coalesce into a single undo entry.
    """
    type = "PropertyChange"

    def __init__(
        self,
        entity_id: str,
        property: str,
        old_value: Any,
        new_value: Any,
        resolve_entity: Callable[[str], Optional[Any]],
        event_bus: EventBus,
        timestamp: Optional[float] = None,
    ):
        if not property or any(not part for part in property.split(".")):
            raise PropertyPathError(f"Invalid property path: {property!r}")

        self.entity_id = entity_id
        self.property = property
        self.old_value = old_value
        self.new_value = new_value
        self.resolve_entity = resolve_entity
        self.event_bus = event_bus
        self.logger = logging.getLogger(self.__class__.__name__)
        super().__init__(self._generate_description(), timestamp)

    def _generate_description(self) -> str:
        entity = self.resolve_entity(self.entity_id)
        entity_name = getattr(entity, "name", None) or "Unknown"

        prop_display = self.property
        for prefix, label in _DISPLAY_PREFIXES:
            prop_display = prop_display.replace(prefix, label, 1)
        prop_display = prop_display.replace(".", " ", 1)

        return f"Change {entity_name} {prop_display}"

    def execute(self):
        self._apply_value(self.new_value)

    def undo(self):
        self._apply_value(self.old_value)

    def _apply_value(self, value: Any):
        entity = self.resolve_entity(self.entity_id)
        if entity is None:
            self.logger.warning(f"Entity not found: {self.entity_id}")
            return

        try:
            target, path = self._resolve_target(entity)
            for segment in path[:-1]:
                target = _get_child(target, segment)
            _set_child(target, path[-1], value)
        except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
            self.logger.warning(f"Could not set '{self.property}' on {self.entity_id}: {e}")
            return

        self.event_bus.emit(PROPERTY_UPDATED, {
            "id": self.entity_id,
            "property": self.property,
            "entity": entity,
        })

    def _resolve_target(self, entity: Any):
        """Returns the object the rest of the path is relative to, and that path."""
        segments: List[str] = self.property.split(".")
        head = segments[0]

        if head in TRANSFORM_PROPERTIES and len(segments) == 2:
            return entity.transform, segments

        if len(segments) > 1 and callable(getattr(entity, "get_component", None)):
            component = entity.get_component(head)
            if component is not None:
                return component, segments[1:]

        return entity, segments

    def can_merge_with(self, other: BaseCommand) -> bool:
        """
        Same entity, same property, and other created less than
        COALESCE_WINDOW_MS after this command.
        """
        if not isinstance(other, PropertyChangeCommand):
            return False

        return (
            other.entity_id == self.entity_id
            and other.property == self.property
            and other.timestamp - self.timestamp < COALESCE_WINDOW_MS
        )

    def merge_with(self, other: BaseCommand) -> BaseCommand:
        """Keeps this command's old value and takes other's new value."""
        if not isinstance(other, PropertyChangeCommand):
            return other

        return PropertyChangeCommand(
            entity_id=self.entity_id,
            property=self.property,
            old_value=self.old_value,
            new_value=other.new_value,
            resolve_entity=self.resolve_entity,
            event_bus=self.event_bus,
            timestamp=other.timestamp,
        )


def _get_child(target: Any, segment: str) -> Any:
    if isinstance(target, Sequence) and not isinstance(target, str):
        return target[_index(segment)]
    return getattr(target, segment)


def _set_child(target: Any, segment: str, value: Any):
    if isinstance(target, MutableSequence):
        target[_index(segment)] = value
    else:
        setattr(target, segment, value)


def _index(segment: str) -> int:
    if segment in AXES:
        return AXES[segment]
    return int(segment)
