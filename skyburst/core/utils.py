"""
Math helpers shared by the simulation and the renderer
"""

import numpy as np


class MathUtils:
    """Scalar interpolation utilities"""

    @staticmethod
    def lerp(a: float, b: float, t: float) -> float:
        """Linear interpolation between a and b"""
        return a + (b - a) * t

    @staticmethod
    def clamp(value: float, lo: float, hi: float) -> float:
        """Constrain value to [lo, hi]"""
        return max(lo, min(hi, value))

    @staticmethod
    def map_range(value: float, in_lo: float, in_hi: float, out_lo: float, out_hi: float) -> float:
        """Re-map value from one range to another (no clamping)"""
        if in_hi == in_lo:
            return out_lo
        return out_lo + (value - in_lo) * (out_hi - out_lo) / (in_hi - in_lo)

    @staticmethod
    def is_number(value) -> bool:
        """True for finite ints/floats (bools excluded)"""
        if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
            return False
        return bool(np.isfinite(value))
