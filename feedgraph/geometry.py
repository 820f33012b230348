import math


def safe_direction(dx, dy):
    """
    Returns (ux, uy, length) for the vector (dx, dy).

    A zero-length (or non-finite) vector has no direction, so the unit
    vector comes back as (0, 0). Every force goes through here, so
    coincident nodes exert no force on each other.
    """
    length = math.hypot(dx, dy)
    if length == 0 or not math.isfinite(length):
        return 0.0, 0.0, 0.0
    return dx / length, dy / length, length


def is_finite_number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
