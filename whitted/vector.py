"""
vector.py

3D vector used for positions, directions and linear RGB colors.
"""
import math
from dataclasses import dataclass


@dataclass
class Vec3:
    x: float
    y: float
    z: float

    # copying ops
    def __add__(self, other): return Vec3(self.x+other.x, self.y+other.y, self.z+other.z)
    def __sub__(self, other): return Vec3(self.x-other.x, self.y-other.y, self.z-other.z)
    def __mul__(self, s): return self.scale(s) if isinstance(s, (int, float)) else self.mult(s)
    __rmul__ = __mul__
    def __neg__(self): return Vec3(-self.x, -self.y, -self.z)
    def __iter__(self): return iter((self.x, self.y, self.z))

    def add(self, other): return self + other
    def subtract(self, other): return self - other
    def scale(self, s): return Vec3(self.x*s, self.y*s, self.z*s)
    def mult(self, other): return Vec3(self.x*other.x, self.y*other.y, self.z*other.z)
    def dot(self, other): return self.x*other.x + self.y*other.y + self.z*other.z
    def length(self): return math.sqrt(self.x*self.x + self.y*self.y + self.z*self.z)
    def copy(self): return Vec3(self.x, self.y, self.z)

    # mutating ops, both return self so they can be chained
    def normalize(self):
        l = self.length()
        if l == 0:
            raise ValueError("cannot normalize a zero-length vector")
        inv = 1.0 / l
        self.x *= inv
        self.y *= inv
        self.z *= inv
        return self

    def negate(self):
        self.x, self.y, self.z = -self.x, -self.y, -self.z
        return self

    def normalized(self):
        return self.copy().normalize()

    def to_rgb(self, clamp=False):
        """Convert a linear color to an (r, g, b) byte triple.

        Channels are truncated, not rounded. Without ``clamp`` a channel
        outside [0, 1] wraps around modulo 256 like an unchecked 8-bit cast.
        """
        if clamp:
            return tuple(int(_clamp(c) * 255) for c in self)
        return tuple(int(c * 255) & 0xFF for c in self)

    @classmethod
    def of(cls, seq):
        x, y, z = seq
        return cls(float(x), float(y), float(z))


def _clamp(x, a=0.0, b=1.0):
    return max(a, min(b, x))
