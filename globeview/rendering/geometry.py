"""WGS84 geometry helpers shared by the LOD engine and the scene adapter.

Conversions follow the conventions of Cesium's ``Cartesian3.fromDegrees`` and
``Transforms.headingPitchRollQuaternion`` so that positions and orientations
computed here can be handed to a Cesium viewer unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

WGS84_RADIUS_X = 6378137.0
WGS84_RADIUS_Z = 6356752.3142451793

_RADII_SQUARED = (
    WGS84_RADIUS_X * WGS84_RADIUS_X,
    WGS84_RADIUS_X * WGS84_RADIUS_X,
    WGS84_RADIUS_Z * WGS84_RADIUS_Z,
)
_EPSILON = 1e-12

Matrix3 = tuple[
    tuple[float, float, float],
    tuple[float, float, float],
    tuple[float, float, float],
]


def to_radians(degrees: float) -> float:
    return degrees * math.pi / 180.0


@dataclass(frozen=True)
class Cartesian3:
    """Earth-centred, earth-fixed position in metres."""

    x: float
    y: float
    z: float

    def __sub__(self, other: Cartesian3) -> Cartesian3:
        return Cartesian3(self.x - other.x, self.y - other.y, self.z - other.z)

    def dot(self, other: Cartesian3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Cartesian3) -> Cartesian3:
        return Cartesian3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> Cartesian3:
        length = self.magnitude()
        if length < _EPSILON:
            raise ValueError("Cannot normalize a zero-length vector")
        return Cartesian3(self.x / length, self.y / length, self.z / length)

    def distance(self, other: Cartesian3) -> float:
        return (self - other).magnitude()


@dataclass(frozen=True)
class Quaternion:
    x: float
    y: float
    z: float
    w: float

    @classmethod
    def from_axis_angle(cls, axis: Cartesian3, angle: float) -> Quaternion:
        half = angle / 2.0
        s = math.sin(half)
        return cls(axis.x * s, axis.y * s, axis.z * s, math.cos(half))

    @classmethod
    def from_rotation_matrix(cls, m: Matrix3) -> Quaternion:
        trace = m[0][0] + m[1][1] + m[2][2]
        if trace > 0.0:
            s = 0.5 / math.sqrt(trace + 1.0)
            return cls(
                (m[2][1] - m[1][2]) * s,
                (m[0][2] - m[2][0]) * s,
                (m[1][0] - m[0][1]) * s,
                0.25 / s,
            )
        if m[0][0] > m[1][1] and m[0][0] > m[2][2]:
            s = 2.0 * math.sqrt(1.0 + m[0][0] - m[1][1] - m[2][2])
            return cls(
                0.25 * s,
                (m[0][1] + m[1][0]) / s,
                (m[0][2] + m[2][0]) / s,
                (m[2][1] - m[1][2]) / s,
            )
        if m[1][1] > m[2][2]:
            s = 2.0 * math.sqrt(1.0 + m[1][1] - m[0][0] - m[2][2])
            return cls(
                (m[0][1] + m[1][0]) / s,
                0.25 * s,
                (m[1][2] + m[2][1]) / s,
                (m[0][2] - m[2][0]) / s,
            )
        s = 2.0 * math.sqrt(1.0 + m[2][2] - m[0][0] - m[1][1])
        return cls(
            (m[0][2] + m[2][0]) / s,
            (m[1][2] + m[2][1]) / s,
            0.25 * s,
            (m[1][0] - m[0][1]) / s,
        )

    def __mul__(self, other: Quaternion) -> Quaternion:
        lx, ly, lz, lw = self.x, self.y, self.z, self.w
        rx, ry, rz, rw = other.x, other.y, other.z, other.w
        return Quaternion(
            lw * rx + lx * rw + ly * rz - lz * ry,
            lw * ry - lx * rz + ly * rw + lz * rx,
            lw * rz + lx * ry - ly * rx + lz * rw,
            lw * rw - lx * rx - ly * ry - lz * rz,
        )

    def to_rotation_matrix(self) -> Matrix3:
        x, y, z, w = self.x, self.y, self.z, self.w
        return (
            (1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)),
            (2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)),
            (2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)),
        )

    def rotate(self, vector: Cartesian3) -> Cartesian3:
        m = self.to_rotation_matrix()
        return Cartesian3(
            m[0][0] * vector.x + m[0][1] * vector.y + m[0][2] * vector.z,
            m[1][0] * vector.x + m[1][1] * vector.y + m[1][2] * vector.z,
            m[2][0] * vector.x + m[2][1] * vector.y + m[2][2] * vector.z,
        )


UNIT_X = Cartesian3(1.0, 0.0, 0.0)
UNIT_Y = Cartesian3(0.0, 1.0, 0.0)
UNIT_Z = Cartesian3(0.0, 0.0, 1.0)


def cartesian_from_degrees(longitude: float, latitude: float, height: float = 0.0) -> Cartesian3:
    """Convert geodetic degrees and ellipsoid height to an ECEF position."""

    lon = to_radians(longitude)
    lat = to_radians(latitude)
    cos_lat = math.cos(lat)
    normal = Cartesian3(cos_lat * math.cos(lon), cos_lat * math.sin(lon), math.sin(lat)).normalize()
    k = Cartesian3(
        _RADII_SQUARED[0] * normal.x,
        _RADII_SQUARED[1] * normal.y,
        _RADII_SQUARED[2] * normal.z,
    )
    gamma = math.sqrt(normal.dot(k))
    return Cartesian3(
        k.x / gamma + normal.x * height,
        k.y / gamma + normal.y * height,
        k.z / gamma + normal.z * height,
    )


def geodetic_surface_normal(position: Cartesian3) -> Cartesian3:
    return Cartesian3(
        position.x / _RADII_SQUARED[0],
        position.y / _RADII_SQUARED[1],
        position.z / _RADII_SQUARED[2],
    ).normalize()


def east_north_up_axes(position: Cartesian3) -> tuple[Cartesian3, Cartesian3, Cartesian3]:
    """Return the local east, north and up unit vectors at ``position``."""

    if abs(position.x) < _EPSILON and abs(position.y) < _EPSILON:
        # Poles: east is undefined, pick +Y like Cesium does.
        sign = 1.0 if position.z >= 0 else -1.0
        return UNIT_Y, Cartesian3(-sign, 0.0, 0.0), Cartesian3(0.0, 0.0, sign)

    up = geodetic_surface_normal(position)
    east = Cartesian3(-position.y, position.x, 0.0).normalize()
    north = up.cross(east)
    return east, north, up


def heading_pitch_roll_quaternion(
    position: Cartesian3,
    heading: float,
    pitch: float = 0.0,
    roll: float = 0.0,
) -> Quaternion:
    """Orientation of a model at ``position`` with the given HPR in radians.

    Heading turns clockwise about the local up axis (seen from above) and
    pitch about the local north axis, matching Cesium's convention.
    """

    local = (
        Quaternion.from_axis_angle(UNIT_Z, -heading)
        * Quaternion.from_axis_angle(UNIT_Y, -pitch)
        * Quaternion.from_axis_angle(UNIT_X, roll)
    )
    hpr = local.to_rotation_matrix()
    east, north, up = east_north_up_axes(position)
    frame = (
        (east.x, north.x, up.x),
        (east.y, north.y, up.y),
        (east.z, north.z, up.z),
    )
    rotation = tuple(
        tuple(sum(frame[row][k] * hpr[k][col] for k in range(3)) for col in range(3))
        for row in range(3)
    )
    return Quaternion.from_rotation_matrix(rotation)  # type: ignore[arg-type]


__all__ = [
    "Cartesian3",
    "Quaternion",
    "UNIT_X",
    "UNIT_Y",
    "UNIT_Z",
    "WGS84_RADIUS_X",
    "WGS84_RADIUS_Z",
    "cartesian_from_degrees",
    "east_north_up_axes",
    "geodetic_surface_normal",
    "heading_pitch_roll_quaternion",
    "to_radians",
]
