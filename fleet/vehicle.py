# FILE: fleet/vehicle.py
import json
import logging
import math
from dataclasses import dataclass

from errors import DegenerateGeometryError, VehicleSpecError

# Factsheet key -> VehicleProfile field
_PHYSICAL_PARAMETERS = {
    "speedMin": "speed_min",
    "speedMax": "speed_max",
    "accelerationMax": "acceleration_max",
    "decelerationMax": "deceleration_max",
    "heightMin": "height_min",
    "heightMax": "height_max",
    "width": "width",
    "length": "length",
}


@dataclass(frozen=True)
class VehicleProfile:
    """Kinematic and geometric limits of one AGV type.

    Only ``speed_max`` feeds the cost model. Acceleration, height and
    footprint size are carried along unchanged for callers that need them.
    """
    speed_min: float
    speed_max: float
    acceleration_max: float
    deceleration_max: float
    height_min: float
    height_max: float
    width: float
    length: float

    def validate(self) -> "VehicleProfile":
        if not self.speed_max > 0:
            raise DegenerateGeometryError(f"Vehicle speedMax must be positive, got {self.speed_max}")
        return self


def json_to_vehicle(json_text: str) -> VehicleProfile:
    """Parses an AGV factsheet. Unknown keys are ignored."""
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        logging.error(f"Vehicle factsheet is not valid JSON: {e}")
        raise VehicleSpecError(f"Vehicle factsheet is not valid JSON: {e}") from e

    params = data.get("physicalParameters") if isinstance(data, dict) else None
    if not isinstance(params, dict):
        raise VehicleSpecError("Vehicle factsheet has no 'physicalParameters' object")

    values = {}
    for key, field_name in _PHYSICAL_PARAMETERS.items():
        if key not in params:
            raise VehicleSpecError(f"Vehicle factsheet is missing physicalParameters.{key}")
        value = params[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise VehicleSpecError(f"physicalParameters.{key} must be a number, got {value!r}")
        try:
            number = float(value)
        except OverflowError as e:
            raise VehicleSpecError(f"physicalParameters.{key} is out of range: {value!r}") from e
        if not math.isfinite(number):
            raise VehicleSpecError(f"physicalParameters.{key} must be finite, got {value!r}")
        values[field_name] = number

    vehicle = VehicleProfile(**values)
    logging.info(f"Loaded vehicle profile: speed {vehicle.speed_min}-{vehicle.speed_max} m/s, "
                 f"footprint {vehicle.width}x{vehicle.length} m.")
    return vehicle
