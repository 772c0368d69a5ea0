"""
Vendor conventions.

Controllers disagree with the engine about the zero position and the
positive direction of several axes. Each vendor carries a small policy
record instead of a subclass: per-joint sign and offset, the reference pose
used to build a model, and the program file extension.

Conversion rule, per joint index ``i``::

    engine = sign[i] * radians(native) + offset[i]
    native = degrees(sign[i] * (engine - offset[i]))
"""

import math
from dataclasses import dataclass
from enum import Enum

HALF_PI = math.pi / 2.0


class Vendor(Enum):
    """Supported robot manufacturers."""

    ABB = "ABB"
    KUKA = "KUKA"


@dataclass(frozen=True)
class VendorPolicy:
    """
    Angle conventions of one vendor.

    Attributes:
        vendor: Vendor tag.
        signs: Direction of each native axis relative to the engine (+1/-1).
        offsets: Engine angle (radians) at native zero, per joint.
        reference: Engine joint vector used to derive joint frames when a
            model is built. Must lie inside every joint range.
        extension: Controller program file extension.
    """

    vendor: Vendor
    signs: tuple[float, ...]
    offsets: tuple[float, ...]
    reference: tuple[float, ...]
    extension: str

    def degree_to_radian(self, value: float, index: int) -> float:
        """Native degrees of joint ``index`` (0-based) to engine radians."""
        self._check_index(index)
        return self.signs[index] * math.radians(value) + self.offsets[index]

    def radian_to_degree(self, value: float, index: int) -> float:
        """Engine radians of joint ``index`` (0-based) to native degrees."""
        self._check_index(index)
        return math.degrees(self.signs[index] * (value - self.offsets[index]))

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.signs):
            raise IndexError(f"Joint index {index} out of range 0..{len(self.signs) - 1}")


VENDOR_POLICIES: dict[Vendor, VendorPolicy] = {
    # Upper arm vertical at native zero; axes 2, 3 and 5 tilt down when positive.
    Vendor.ABB: VendorPolicy(
        vendor=Vendor.ABB,
        signs=(1.0, -1.0, -1.0, 1.0, -1.0, 1.0),
        offsets=(0.0, HALF_PI, 0.0, 0.0, 0.0, 0.0),
        reference=(0.0, HALF_PI, 0.0, 0.0, 0.0, 0.0),
        extension=".mod",
    ),
    # Every axis counts clockwise; A2 = 0 is a horizontal arm and A3 = 90 a
    # horizontal forearm, so the reference is native [0, -90, 90, 0, 0, 0].
    Vendor.KUKA: VendorPolicy(
        vendor=Vendor.KUKA,
        signs=(-1.0, -1.0, -1.0, -1.0, -1.0, -1.0),
        offsets=(0.0, 0.0, HALF_PI, 0.0, 0.0, 0.0),
        reference=(0.0, HALF_PI, 0.0, 0.0, 0.0, 0.0),
        extension=".src",
    ),
}


def get_policy(vendor: Vendor | str) -> VendorPolicy:
    """
    Look up the policy of a vendor.

    Args:
        vendor: Vendor tag or its name (case-insensitive).

    Returns:
        The vendor's policy.

    Raises:
        ValueError: If the vendor is not supported.
    """
    if isinstance(vendor, str):
        try:
            vendor = Vendor(vendor.upper())
        except ValueError:
            supported = [v.value for v in Vendor]
            raise ValueError(f"Unsupported vendor '{vendor}', expected one of {supported}") from None
    return VENDOR_POLICIES[vendor]
