"""Static table of known SMC temperature keys.

Key names follow the conventions collected by the open-source SMC tools
(first letter T for temperature, then the component: C CPU, G GPU,
M memory, S storage, A ambient, h heatpipe, p power supply).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Sensor(BaseModel):
    """One SMC temperature channel. Identity is the key."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Four-character SMC key, e.g. 'TC0P'")
    name: str = Field(..., description="Human-readable sensor name")
    icon_tag: str | None = Field(default=None, description="Optional icon hint for the UI")

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys are exactly four ASCII characters."""
        if not is_valid_key(v):
            raise ValueError(f"SMC key must be 4 ASCII characters, got {v!r}")
        return v


def is_valid_key(key: str) -> bool:
    """Return True if key is a four-character ASCII SMC key."""
    return isinstance(key, str) and len(key) == 4 and key.isascii()


KNOWN_SENSORS: tuple[Sensor, ...] = (
    Sensor(key="TC0P", name="CPU Proximity", icon_tag="cpu"),
    Sensor(key="TC0D", name="CPU Diode", icon_tag="cpu"),
    Sensor(key="TC0H", name="CPU Heatsink", icon_tag="cpu"),
    Sensor(key="TC1C", name="CPU Core 1", icon_tag="cpu"),
    Sensor(key="TC2C", name="CPU Core 2", icon_tag="cpu"),
    Sensor(key="TCGC", name="CPU Graphics", icon_tag="cpu"),
    Sensor(key="TG0P", name="GPU Proximity", icon_tag="gpu"),
    Sensor(key="TG0D", name="GPU Diode", icon_tag="gpu"),
    Sensor(key="TG0H", name="GPU Heatsink", icon_tag="gpu"),
    Sensor(key="TM0P", name="Memory Proximity", icon_tag="memory"),
    Sensor(key="TM0S", name="Memory Slot 1", icon_tag="memory"),
    Sensor(key="TS0S", name="SSD Controller", icon_tag="storage"),
    Sensor(key="TA0P", name="Ambient", icon_tag="ambient"),
    Sensor(key="Th0H", name="Main Heatpipe 1"),
    Sensor(key="Tp0P", name="Power Supply Proximity", icon_tag="power"),
)

# Preferred default assignments for the first two display slots
DEFAULT_PRIMARY_KEY = "TC0P"
DEFAULT_SECONDARY_KEY = "TG0D"


def find_sensor(key: str, catalog: tuple[Sensor, ...] = KNOWN_SENSORS) -> Sensor | None:
    """Look up a sensor by key.

    Args:
        key: Four-character SMC key.
        catalog: Catalog to search.

    Returns:
        The matching Sensor, or None if the key is not catalogued.
    """
    for sensor in catalog:
        if sensor.key == key:
            return sensor
    return None
