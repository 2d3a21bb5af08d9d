"""Closed tag sets for signal categories and units."""

from enum import Enum


class Category(Enum):
    """Top-level path a signal is filed under."""

    ADAS = "ADAS"
    AIRBAGS = "Airbags"
    BATTERY = "Battery"
    BRAKES = "Brakes"
    CHARGING = "Charging"
    CLIMATE = "Climate"
    CONTROL = "Control"
    DOORS = "Doors"
    ELECTRICAL = "Electrical"
    ENGINE = "Engine"
    FUEL = "Fuel"
    LIGHTING = "Lighting"
    MAINTENANCE = "Maintenance"
    MOVEMENT = "Movement"
    SEATS = "Seats"
    STEERING = "Steering"
    TIRES = "Tires"
    TRANSMISSION = "Transmission"
    TRIPS = "Trips"
    WINDOWS = "Windows"
    WIPERS = "Wipers"


class Unit(Enum):
    """Unit tag attached to a decoded measurement."""

    AMPS = "amps"
    ASCII = "ascii"
    BARS = "bars"
    CELSIUS = "celsius"
    DEGREES = "degrees"
    FAHRENHEIT = "fahrenheit"
    G_FORCE = "gForce"
    GALLONS = "gallons"
    GRAMS_PER_SECOND = "gramsPerSecond"
    HERTZ = "hertz"
    HOURS = "hours"
    KILOGRAMS = "kilograms"
    KILOMETERS = "kilometers"
    KILOMETERS_PER_HOUR = "kilometersPerHour"
    KILOPASCAL = "kilopascal"
    KILOWATT_HOURS = "kilowattHours"
    KILOWATTS = "kilowatts"
    LITERS = "liters"
    LITERS_PER_100_KILOMETERS = "litersPer100Kilometers"
    METERS_PER_SECOND_SQUARED = "metersPerSecondSquared"
    MILES = "miles"
    MILES_PER_HOUR = "milesPerHour"
    MILLIAMPS = "milliamps"
    MILLISECONDS = "milliseconds"
    MINUTES = "minutes"
    NEWTON_METERS = "newtonMeters"
    NORMAL = "normal"
    OHMS = "ohms"
    PERCENT = "percent"
    PSI = "psi"
    RPM = "rpm"
    SCALAR = "scalar"
    SECONDS = "seconds"
    VOLTS = "volts"
    WATTS = "watts"
    YES_NO = "yesno"
    UNKNOWN = "unknown"

    @property
    def symbol(self) -> str:
        """Short display symbol for console output."""
        return _SYMBOLS.get(self, self.value)


_SYMBOLS = {
    Unit.AMPS: "A",
    Unit.BARS: "bar",
    Unit.CELSIUS: "°C",
    Unit.DEGREES: "°",
    Unit.FAHRENHEIT: "°F",
    Unit.GRAMS_PER_SECOND: "g/s",
    Unit.HERTZ: "Hz",
    Unit.HOURS: "h",
    Unit.KILOGRAMS: "kg",
    Unit.KILOMETERS: "km",
    Unit.KILOMETERS_PER_HOUR: "km/h",
    Unit.KILOPASCAL: "kPa",
    Unit.KILOWATT_HOURS: "kWh",
    Unit.KILOWATTS: "kW",
    Unit.LITERS: "L",
    Unit.LITERS_PER_100_KILOMETERS: "L/100km",
    Unit.METERS_PER_SECOND_SQUARED: "m/s²",
    Unit.MILES: "mi",
    Unit.MILES_PER_HOUR: "mph",
    Unit.MILLIAMPS: "mA",
    Unit.MILLISECONDS: "ms",
    Unit.MINUTES: "min",
    Unit.NEWTON_METERS: "Nm",
    Unit.OHMS: "Ω",
    Unit.PERCENT: "%",
    Unit.SECONDS: "s",
    Unit.VOLTS: "V",
    Unit.WATTS: "W",
}
