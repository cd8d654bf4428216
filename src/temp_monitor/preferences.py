"""User preferences: display layout, slot assignments and monitored sensors.

PreferencesStore is constructed explicitly and handed to whichever
component needs it. Changes are persisted immediately and announced to
subscribers registered with subscribe().
"""

from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from temp_monitor.config.loader import dump_yaml_file, load_yaml_file
from temp_monitor.smc.catalog import DEFAULT_PRIMARY_KEY, DEFAULT_SECONDARY_KEY, Sensor
from temp_monitor.telemetry import (
    PREFERENCES_CHANGED,
    PREFERENCES_DEFAULTS_REGISTERED,
    PREFERENCES_LOADED,
    PREFERENCES_SAVED,
    PREFERENCES_SUBSCRIBER_FAILED,
    get_logger,
)

log = get_logger(__name__)

SLOT_COUNT = 4

# Change events passed to subscribers
EVENT_LAYOUT = "layout"
EVENT_SLOT = "slot"
EVENT_MONITORED = "monitored"

Subscriber = Callable[[str, Any], None]


class PreferencesError(Exception):
    """Raised when preferences cannot be read or written."""

    pass


class LayoutMode(int, Enum):
    """Number of temperature slots shown in the status item."""

    SINGLE = 1
    DUAL = 2
    QUAD = 4

    @classmethod
    def parse(cls, value: Any) -> "LayoutMode":
        """Map a persisted value to a layout, defaulting to DUAL."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.DUAL

    @property
    def slot_count(self) -> int:
        return int(self.value)


class Preferences(BaseModel):
    """Persisted user preferences."""

    layout: LayoutMode = Field(default=LayoutMode.DUAL, description="Display layout")
    slot_keys: list[str | None] = Field(
        default_factory=lambda: [None] * SLOT_COUNT,
        description="Sensor key per slot (1-4); None leaves the slot empty",
    )
    monitored_keys: list[str] | None = Field(
        default=None,
        description="Sensors the user chose to monitor; None means never configured",
    )

    @field_validator("layout", mode="before")
    @classmethod
    def parse_layout(cls, v: Any) -> LayoutMode:
        """Unknown layouts fall back to DUAL."""
        return LayoutMode.parse(v)

    @field_validator("slot_keys", mode="before")
    @classmethod
    def normalize_slot_keys(cls, v: Any) -> list[str | None]:
        """Pad or truncate to four slots; empty strings mean no sensor."""
        keys = list(v or [])[:SLOT_COUNT]
        keys += [None] * (SLOT_COUNT - len(keys))
        return [k if k else None for k in keys]


class PreferencesStore:
    """Loads, saves and edits Preferences at a fixed path.

    Attributes:
        path: YAML file backing the store.
        preferences: Current in-memory preferences.
    """

    def __init__(self, path: Path) -> None:
        """Create a store with default preferences. Call load() to read the file."""
        self.path = path
        self.preferences = Preferences()
        self._subscribers: list[Subscriber] = []

    def load(self) -> Preferences:
        """Read preferences from disk; a missing file yields defaults.

        Raises:
            PreferencesError: If the file exists but is unreadable or invalid.
        """
        if not self.path.exists():
            log.debug("preferences_file_missing", path=str(self.path))
            self.preferences = Preferences()
            return self.preferences

        data = load_yaml_file(self.path, error_class=PreferencesError)
        try:
            self.preferences = Preferences.model_validate(data)
        except ValidationError as e:
            raise PreferencesError(f"Invalid preferences in {self.path}: {e}") from None

        log.info(
            PREFERENCES_LOADED,
            path=str(self.path),
            layout=self.preferences.layout.value,
            slot_keys=self.preferences.slot_keys,
        )
        return self.preferences

    def save(self) -> None:
        """Write preferences to disk.

        Raises:
            PreferencesError: If the file cannot be written.
        """
        dump_yaml_file(
            self.path, self.preferences.model_dump(mode="json"), error_class=PreferencesError
        )
        log.debug(PREFERENCES_SAVED, path=str(self.path))

    # Observers

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change callback.

        The callback receives (event, payload): ("layout", LayoutMode),
        ("slot", slot number) or ("monitored", list of keys).

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: str, payload: Any) -> None:
        log.info(PREFERENCES_CHANGED, change=event, payload=str(payload))
        for callback in list(self._subscribers):
            try:
                callback(event, payload)
            except Exception as e:
                log.error(
                    PREFERENCES_SUBSCRIBER_FAILED,
                    change=event,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )

    # Setters

    def set_layout(self, layout: LayoutMode) -> None:
        self.preferences = self.preferences.model_copy(update={"layout": layout})
        self.save()
        self._notify(EVENT_LAYOUT, layout)

    def slot_key(self, slot: int) -> str | None:
        """Sensor key assigned to slot 1-4."""
        _check_slot(slot)
        return self.preferences.slot_keys[slot - 1]

    def set_slot_key(self, slot: int, key: str | None) -> None:
        """Assign a sensor key (or None) to slot 1-4.

        Raises:
            ValueError: If slot is outside 1-4.
        """
        _check_slot(slot)
        keys = list(self.preferences.slot_keys)
        keys[slot - 1] = key or None
        self.preferences = self.preferences.model_copy(update={"slot_keys": keys})
        self.save()
        self._notify(EVENT_SLOT, slot)

    def set_monitored_keys(self, keys: Iterable[str]) -> None:
        unique = list(dict.fromkeys(keys))
        self.preferences = self.preferences.model_copy(update={"monitored_keys": unique})
        self.save()
        self._notify(EVENT_MONITORED, unique)

    def active_slot_keys(self) -> list[str | None]:
        """Slot keys for the current layout, one entry per visible slot."""
        return list(self.preferences.slot_keys[: self.preferences.layout.slot_count])

    # Defaults

    def register_default_monitored_keys(self, keys: Iterable[str]) -> None:
        """Monitor every given key, unless the user already chose a set."""
        if self.preferences.monitored_keys is not None:
            return
        log.info(PREFERENCES_DEFAULTS_REGISTERED, kind="monitored")
        self.set_monitored_keys(keys)

    def register_default_slot_keys(self, available: Sequence[Sensor]) -> None:
        """Fill slots 1 and 2 from available sensors if no slot is assigned.

        Slot 1 prefers CPU Proximity and slot 2 prefers GPU Diode; otherwise
        the first available sensors are used. Slots 1 and 2 never share a
        key, and slots 3 and 4 stay empty.
        """
        if any(self.preferences.slot_keys):
            return

        keys = [s.key for s in available]
        first = DEFAULT_PRIMARY_KEY if DEFAULT_PRIMARY_KEY in keys else (keys[0] if keys else None)
        remaining = [k for k in keys if k != first]
        if DEFAULT_SECONDARY_KEY in remaining:
            second = DEFAULT_SECONDARY_KEY
        else:
            second = remaining[0] if remaining else None

        log.info(PREFERENCES_DEFAULTS_REGISTERED, kind="slots", slot_1=first, slot_2=second)
        self.preferences = self.preferences.model_copy(
            update={"slot_keys": [first, second, None, None]}
        )
        self.save()
        self._notify(EVENT_SLOT, 1)
        self._notify(EVENT_SLOT, 2)


def _check_slot(slot: int) -> None:
    if not 1 <= slot <= SLOT_COUNT:
        raise ValueError(f"slot must be between 1 and {SLOT_COUNT}, got {slot}")
