import numpy as np
from typing import Optional


def calculate_distance_2d(p1, p2) -> float:
    """Calculates the Euclidean distance between two 2D points."""
    return float(np.linalg.norm(np.asarray(p2, dtype=float) - np.asarray(p1, dtype=float)))


def time_of_impact_disks(center1, vel1, radius1: float,
                         center2, vel2, radius2: float,
                         max_time: float) -> Optional[float]:
    """
    Earliest time in [0, max_time] at which two disks moving at constant
    velocity touch, or None if they stay apart for the whole window.

    Solves |rel_pos + t * rel_vel| = radius1 + radius2 for t. Disks that
    already touch at t=0 report 0.0.
    """
    if max_time < 0:
        return None

    rel_pos = np.asarray(center2, dtype=float) - np.asarray(center1, dtype=float)
    rel_vel = np.asarray(vel2, dtype=float) - np.asarray(vel1, dtype=float)
    combined_radius = radius1 + radius2

    c = np.dot(rel_pos, rel_pos) - combined_radius ** 2
    if c <= 0:
        return 0.0

    a = np.dot(rel_vel, rel_vel)
    half_b = np.dot(rel_pos, rel_vel)
    # Separating or not moving relative to each other
    if a == 0 or half_b >= 0:
        return None

    discriminant = half_b ** 2 - a * c
    if discriminant < 0:
        return None

    toi = (-half_b - np.sqrt(discriminant)) / a
    if toi > max_time:
        return None
    return float(max(toi, 0.0))
