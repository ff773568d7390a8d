"""
TrackedTarget: one detection result produced by a vision pipeline.

A target carries its 2D angular offsets (yaw, pitch, skew), its share of the
image (area, percent), classification results (fiducial id, object-detection
class and confidence), the two candidate camera-to-target poses from 3D pose
estimation, and the corners seen in the image.

Sentinels:
    fiducial_id, obj_detect_class_id   -1 when absent
    obj_detect_confidence              -1 when unset, otherwise [0, 1]
    pose_ambiguity                     -1 when invalid, otherwise [0, 1]
    best_camera_to_target              identity when 3D mode did not run

Consumers must check for -1 before using confidence or ambiguity as numbers.

Image coordinates have their origin at the top-left, x right, y down. For
fiducials the detected corners run counter-clockwise starting bottom-left:

    -> +X     3 ----- 2
    |         |       |
    V +Y      |       |
              0 ----- 1
"""

from typing import Iterable, NamedTuple, Sequence, Tuple

from wpimath.geometry import Transform3d

from .geometry import is_identity
from .logger import LogLevel, get_logger
from .packet import float64_bits, to_float32

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1


class Corner(NamedTuple):
    x: float
    y: float

    def bits(self) -> bytes:
        return float64_bits(self.x) + float64_bits(self.y)


def _as_corner(point) -> Corner:
    x, y = point
    return Corner(float(x), float(y))


class RectCorners(NamedTuple):
    """The four corners of the minimum-area bounding rectangle, in no particular order."""
    c0: Corner
    c1: Corner
    c2: Corner
    c3: Corner

    @classmethod
    def of(cls, points: Sequence) -> 'RectCorners':
        points = list(points)
        if len(points) != 4:
            raise ValueError(f"min area rect needs exactly 4 corners, got {len(points)}")
        return cls(*(_as_corner(p) for p in points))

    @classmethod
    def zero(cls) -> 'RectCorners':
        return cls.of([(0.0, 0.0)] * 4)


def _check_int32(name: str, value: int) -> int:
    value = int(value)
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"{name}={value} does not fit in int32")
    return value


def _float32(name: str, value: float) -> float:
    try:
        return to_float32(float(value))
    except OverflowError:
        raise ValueError(f"{name}={value} is out of float32 range") from None


class TrackedTarget:
    __slots__ = ('_yaw', '_pitch', '_area', '_skew', '_fiducial_id',
                 '_obj_detect_class_id', '_obj_detect_confidence',
                 '_best_camera_to_target', '_alternate_camera_to_target',
                 '_pose_ambiguity', '_min_area_rect_corners', '_detected_corners')

    def __init__(self,
                 yaw: float,
                 pitch: float,
                 area: float,
                 skew: float,
                 fiducial_id: int,
                 obj_detect_class_id: int,
                 obj_detect_confidence: float,
                 best_camera_to_target: Transform3d,
                 alternate_camera_to_target: Transform3d,
                 pose_ambiguity: float,
                 min_area_rect_corners: Sequence,
                 detected_corners: Iterable):
        self._yaw = float(yaw)
        self._pitch = float(pitch)
        self._area = float(area)
        self._skew = float(skew)
        self._fiducial_id = _check_int32('fiducial_id', fiducial_id)
        self._obj_detect_class_id = _check_int32('obj_detect_class_id', obj_detect_class_id)
        # stored at wire precision so decode(encode(t)) == t
        self._obj_detect_confidence = _float32('obj_detect_confidence', obj_detect_confidence)
        self._best_camera_to_target = best_camera_to_target
        self._alternate_camera_to_target = alternate_camera_to_target
        self._pose_ambiguity = float(pose_ambiguity)
        self._min_area_rect_corners = RectCorners.of(min_area_rect_corners)
        self._detected_corners: Tuple[Corner, ...] = tuple(_as_corner(p) for p in detected_corners)

    @classmethod
    def empty(cls) -> 'TrackedTarget':
        """Placeholder meaning "no target"."""
        return cls(0.0, 0.0, 0.0, 0.0, -1, -1, 0.0,
                   Transform3d(), Transform3d(), -1.0,
                   RectCorners.zero(), ())

    def is_empty(self) -> bool:
        return self == _EMPTY

    # --- Accessors ---

    @property
    def yaw(self) -> float:
        """Target yaw in degrees, positive-left."""
        return self._yaw

    @property
    def pitch(self) -> float:
        """Target pitch in degrees, positive-up."""
        return self._pitch

    @property
    def area(self) -> float:
        """Percent of the image covered by the target (0-100)."""
        return self._area

    @property
    def skew(self) -> float:
        """Target skew in degrees, counter-clockwise positive."""
        return self._skew

    @property
    def fiducial_id(self) -> int:
        return self._fiducial_id

    @property
    def obj_detect_class_id(self) -> int:
        return self._obj_detect_class_id

    @property
    def obj_detect_confidence(self) -> float:
        """Classifier confidence in [0, 1], 1 being most confident. -1 if unset."""
        return self._obj_detect_confidence

    @property
    def best_camera_to_target(self) -> Transform3d:
        """
        Transform from camera space (X forward, Y left, Z up) to target space
        with the lowest reprojection error.

        An identity transform means 3D pose estimation never ran for this
        target; a WARN is logged on every such read.
        """
        if is_identity(self._best_camera_to_target):
            get_logger().log(LogLevel.WARN, "TrackedTarget", "3d mode is not enabled")
        return self._best_camera_to_target

    @property
    def alternate_camera_to_target(self) -> Transform3d:
        """Camera-to-target transform with the highest reprojection error."""
        return self._alternate_camera_to_target

    @property
    def pose_ambiguity(self) -> float:
        """
        Ratio of best:alternate reprojection error, between 0 (unambiguous)
        and 1 (both poses fit equally well). Values above 0.2 are likely
        ambiguous. -1 if invalid.
        """
        return self._pose_ambiguity

    @property
    def min_area_rect_corners(self) -> RectCorners:
        return self._min_area_rect_corners

    @property
    def detected_corners(self) -> Tuple[Corner, ...]:
        return self._detected_corners

    # --- Equality ---

    def _scalar_bits(self) -> tuple:
        return (float64_bits(self._yaw), float64_bits(self._pitch),
                float64_bits(self._area), float64_bits(self._skew),
                self._fiducial_id, self._obj_detect_class_id,
                float64_bits(self._obj_detect_confidence),
                float64_bits(self._pose_ambiguity),
                tuple(c.bits() for c in self._min_area_rect_corners),
                tuple(c.bits() for c in self._detected_corners))

    def __eq__(self, other):
        if not isinstance(other, TrackedTarget):
            return NotImplemented
        # transforms use Transform3d.__eq__, which tolerates ~1e-9 per component;
        # everything else is bit-exact
        return (self._scalar_bits() == other._scalar_bits()
                and self._best_camera_to_target == other._best_camera_to_target
                and self._alternate_camera_to_target == other._alternate_camera_to_target)

    def __hash__(self):
        return hash(self._scalar_bits())

    def __repr__(self):
        return (f"TrackedTarget(yaw={self._yaw!r}, pitch={self._pitch!r}, area={self._area!r}, "
                f"skew={self._skew!r}, fiducial_id={self._fiducial_id}, "
                f"obj_detect_class_id={self._obj_detect_class_id}, "
                f"obj_detect_confidence={self._obj_detect_confidence!r}, "
                f"best_camera_to_target={self._best_camera_to_target!r}, "
                f"alternate_camera_to_target={self._alternate_camera_to_target!r}, "
                f"pose_ambiguity={self._pose_ambiguity!r}, "
                f"min_area_rect_corners={list(self._min_area_rect_corners)!r}, "
                f"detected_corners={list(self._detected_corners)!r})")


_EMPTY = TrackedTarget.empty()
