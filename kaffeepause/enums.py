"""Enumerations and small value types shared by the machine's components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class CoinType(Enum):
    EUR005 = 0
    EUR01 = 1
    EUR02 = 2
    EUR05 = 3
    EUR1 = 4
    EUR2 = 5
    INVALID = 6
    RESET = 7


class SensorName(Enum):
    HOPPER = auto()
    COIN_SUPPLY = auto()
    ESPRESSO_BEAN_LEVEL = auto()
    CREMA_BEAN_LEVEL = auto()
    WASTE_DISPOSAL = auto()
    CUP_INSERTED = auto()
    MILK_LEVEL = auto()
    DIRTY_WATER = auto()
    FRESH_WATER_LEVEL = auto()


class Detection(Enum):
    LIGHT_RECEIVED = auto()
    LIGHT_BLOCKED = auto()

    def toggled(self) -> "Detection":
        """The opposite reading."""
        if self is Detection.LIGHT_BLOCKED:
            return Detection.LIGHT_RECEIVED
        return Detection.LIGHT_BLOCKED


class Beans(Enum):
    CREMA = auto()
    ESPRESSO = auto()


class Coffee(Enum):
    UNDEFINED = auto()
    CREMA = auto()
    ESPRESSO = auto()
    CAPPUCCINO = auto()


class Intensity(Enum):
    LIGHT = auto()
    MEDIUM = auto()
    STRONG = auto()


class State(Enum):
    PREPARATION_START = auto()
    READY_SELECT_COFFEE = auto()
    CONFIRM_INTENSITY = auto()
    WAITING_FOR_COIN = auto()
    MAKE_COFFEE = auto()
    GRIND_COFFEE = auto()
    HEATING_WATER = auto()
    WAITING_FOR_CUP = auto()
    BREW_COFFEE = auto()
    DISPENSE_MILK = auto()
    TAKE_OUT_COFFEE = auto()
    MAINTENANCE = auto()
    DECALCIFICATION = auto()
    SHUTDOWN = auto()


class Event(Enum):
    START_UP = auto()
    ABORT_REQUESTED = auto()
    MAINTENANCE_REQUESTED = auto()
    DECALCIFICATION_REQUESTED = auto()
    SHUTDOWN_REQUESTED = auto()
    ERROR = auto()


class ButtonName(Enum):
    UNDEFINED = auto()
    START = auto()
    ABORT = auto()
    MAINTENANCE = auto()
    DECALCIFICATION = auto()
    SHUTDOWN = auto()
    CREMA = auto()
    ESPRESSO = auto()
    CAPPUCCINO = auto()
    LIGHT = auto()
    MEDIUM = auto()
    STRONG = auto()


class ValveType(Enum):
    WATER = auto()
    STEAM = auto()
    MILK = auto()
    SUPPLY = auto()


class ValveState(Enum):
    OPEN = auto()
    CLOSED = auto()


class Mode(Enum):
    STANDBY = auto()
    BREWING = auto()
    STEAMING = auto()
    MAINTENANCE = auto()


class CoinDestination(Enum):
    CASH_REGISTER = auto()
    HOPPER = auto()


class BlockerStatus(Enum):
    CLOSED = auto()
    OPENED = auto()

    def toggled(self) -> "BlockerStatus":
        """The opposite position."""
        if self is BlockerStatus.CLOSED:
            return BlockerStatus.OPENED
        return BlockerStatus.CLOSED


@dataclass(frozen=True)
class CoinData:
    """Physical characteristics a coin sensor measures."""

    diameter_micrometer: int
    width_micrometer: int
    weight_milligram: int
    magnetic_property: int


@dataclass(frozen=True)
class ButtonArea:
    """A rectangular touch area on the screen bound to a button."""

    begin_x: int
    end_x: int
    begin_y: int
    end_y: int
    name: ButtonName

    def contains(self, x: int, y: int) -> bool:
        """Whether a touch at (x, y) lies strictly inside the area."""
        return self.begin_x < x < self.end_x and self.begin_y < y < self.end_y