"""
Unit Registry for Geodetic Inputs.

This module provides a centralized unit system using the `pint` library.
The core works in degrees and meters at its API boundary; callers holding
quantities in other units (radians, arc-minutes, feet, kilometers) convert
through this module instead of scaling by hand.

Example Usage
-------------
>>> from common.units import Q_, to_degrees
>>> to_degrees(Q_(0.5, 'radian'))
28.64788975654116
"""

from functools import wraps
from typing import Callable, Union
import inspect
import warnings

import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity


def validate_units(expected_units: dict[str, str]):
    """Decorator to validate units of function arguments and return values.

    Bare numbers pass through untouched; only quantities are checked.

    Parameters
    ----------
    expected_units : dict[str, str]
        Mapping from argument names to expected unit strings.
        Use 'return' key for return value validation.

    Examples
    --------
    >>> @validate_units({'latitude': 'degree', 'altitude': 'm'})
    ... def place(latitude, altitude):
    ...     return latitude, altitude
    """
    def decorator(func: Callable) -> Callable:
        sig = inspect.signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            bound = sig.bind(*args, **kwargs)
            bound.apply_defaults()

            for param_name, expected_unit in expected_units.items():
                if param_name == 'return':
                    continue

                value = bound.arguments.get(param_name)
                if isinstance(value, pint.Quantity):
                    try:
                        value.to(expected_unit)
                    except pint.DimensionalityError as e:
                        raise ValueError(
                            f"Parameter '{param_name}' has incompatible units. "
                            f"Expected {expected_unit}, got {value.units}"
                        ) from e

            result = func(*args, **kwargs)

            if 'return' in expected_units and isinstance(result, pint.Quantity):
                try:
                    result.to(expected_units['return'])
                except pint.DimensionalityError as e:
                    raise ValueError(
                        f"Return value has incompatible units. "
                        f"Expected {expected_units['return']}, got {result.units}"
                    ) from e

            return result
        return wrapper
    return decorator


def ensure_quantity(
    value: Union[float, pint.Quantity],
    default_unit: str,
    warn: bool = True
) -> pint.Quantity:
    """Ensure a value is a pint Quantity, applying default unit if necessary.

    Parameters
    ----------
    value : float or pint.Quantity
        The value to convert.
    default_unit : str
        The unit to apply if value is a bare number.
    warn : bool
        Whether to warn when a bare number is given.

    Returns
    -------
    pint.Quantity
        The value with units.
    """
    if isinstance(value, pint.Quantity):
        return value
    if warn:
        warnings.warn(
            f"Bare number {value} provided without units. "
            f"Assuming {default_unit}. Consider using explicit units.",
            UserWarning,
            stacklevel=2
        )
    return ureg.Quantity(value, default_unit)


def to_degrees(value: Union[float, pint.Quantity]) -> float:
    """Magnitude of an angle in degrees; bare numbers are taken as degrees."""
    return float(ensure_quantity(value, STANDARD_UNITS["latitude"], warn=False).to("degree").magnitude)


def to_meters(value: Union[float, pint.Quantity]) -> float:
    """Magnitude of a length in meters; bare numbers are taken as meters."""
    return float(ensure_quantity(value, STANDARD_UNITS["altitude"], warn=False).to("meter").magnitude)


# Units used at the API boundary
STANDARD_UNITS = {
    "latitude": "degree",
    "longitude": "degree",
    "altitude": "meter",
    "world": "meter",
    "angle_internal": "radian",
}
