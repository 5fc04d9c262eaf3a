import enum
import math
import struct


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


def to_i32(v: int) -> int:
    """Wraps an arbitrary precision int into the signed 32-bit range"""
    return (v - INT_MIN) % 2**32 + INT_MIN


def to_f32(v: float) -> float:
    """Rounds to the nearest single precision float"""
    if math.isnan(v) or math.isinf(v):
        return v
    try:
        return struct.unpack("f", struct.pack("f", v))[0]
    except OverflowError:
        return math.copysign(math.inf, v)


def format_f32(v: float) -> str:
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    # shortest digits that read back as the same single precision value
    for precision in range(1, 10):
        s = f"{v:.{precision - 1}e}"
        if to_f32(float(s)) == v:
            break
    if v == 0 or 1e-3 <= abs(v) < 1e7:
        return repr(float(s))
    mantissa, exponent = s.split("e")
    if "." not in mantissa:
        mantissa += ".0"
    return f"{mantissa}E{int(exponent)}"
