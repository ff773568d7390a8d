"""
Wire codec for TrackedTarget.

Layout (little-endian, see packet.BYTE_ORDER). The field order is the
protocol; changing it breaks every peer.

    off  size  field
      0     8  yaw                        float64
      8     8  pitch                      float64
     16     8  area                       float64
     24     8  skew                       float64
     32     4  fiducial_id                int32
     36     4  obj_detect_class_id        int32
     40     4  obj_detect_confidence      float32
     44    56  best_camera_to_target      7 x float64 (tx ty tz qw qx qy qz)
    100    56  alternate_camera_to_target 7 x float64
    156     8  pose_ambiguity             float64
    164    64  min_area_rect_corners      4 x (x, y) float64, no prefix
    228     4  detected corner count n    uint32
    232  16*n  detected_corners           n x (x, y) float64
"""

from .config import is_packet_dump_enabled
from .geometry import TRANSFORM3D_SIZE, encode_transform3d, decode_transform3d
from .logger import LogLevel, get_logger
from .packet import Packet, PacketError, hexdump
from .target import Corner, RectCorners, TrackedTarget

CORNER_SIZE = 16
TARGET_FIXED_SIZE = 4 * 8 + 4 + 4 + 4 + 2 * TRANSFORM3D_SIZE + 8 + 4 * CORNER_SIZE + 4


def encoded_size(target: TrackedTarget) -> int:
    return TARGET_FIXED_SIZE + CORNER_SIZE * len(target.detected_corners)


def _encode_corner(packet: Packet, corner: Corner):
    packet.encode_float64(corner.x)
    packet.encode_float64(corner.y)


def _decode_corner(packet: Packet) -> Corner:
    x = packet.decode_float64()
    y = packet.decode_float64()
    return Corner(x, y)


def encode_target(packet: Packet, target: TrackedTarget):
    start = packet.size()

    packet.encode_float64(target.yaw)
    packet.encode_float64(target.pitch)
    packet.encode_float64(target.area)
    packet.encode_float64(target.skew)
    packet.encode_int32(target.fiducial_id)
    packet.encode_int32(target.obj_detect_class_id)
    packet.encode_float32(target.obj_detect_confidence)

    # read the raw slot; the public accessor warns on identity poses
    encode_transform3d(packet, target._best_camera_to_target)
    encode_transform3d(packet, target.alternate_camera_to_target)

    packet.encode_float64(target.pose_ambiguity)

    for corner in target.min_area_rect_corners:
        _encode_corner(packet, corner)

    packet.encode_uint32(len(target.detected_corners))
    for corner in target.detected_corners:
        _encode_corner(packet, corner)

    if is_packet_dump_enabled():
        _dump("encode", packet.get_data()[start:])


def decode_target(packet: Packet) -> TrackedTarget:
    """
    Read one TrackedTarget from the packet's read cursor.

    Raises PacketUnderrunError if the packet ends before the target does,
    including when the detected-corner count claims more pairs than remain.
    """
    start = packet.read_position

    yaw = packet.decode_float64()
    pitch = packet.decode_float64()
    area = packet.decode_float64()
    skew = packet.decode_float64()
    fiducial_id = packet.decode_int32()
    class_id = packet.decode_int32()
    confidence = packet.decode_float32()

    best = decode_transform3d(packet)
    alternate = decode_transform3d(packet)

    ambiguity = packet.decode_float64()

    rect = RectCorners(*(_decode_corner(packet) for _ in range(4)))

    count = packet.decode_uint32()
    packet.require(count * CORNER_SIZE)
    detected = [_decode_corner(packet) for _ in range(count)]

    if is_packet_dump_enabled():
        _dump("decode", packet.get_data()[start:packet.read_position])

    return TrackedTarget(yaw, pitch, area, skew, fiducial_id, class_id, confidence,
                         best, alternate, ambiguity, rect, detected)


def serialize_target(target: TrackedTarget) -> bytes:
    packet = Packet()
    encode_target(packet, target)
    return packet.get_data()


def deserialize_target(data: bytes, strict: bool = False) -> TrackedTarget:
    packet = Packet(data)
    target = decode_target(packet)
    if strict and packet.remaining():
        raise PacketError(f"{packet.remaining()} trailing byte(s) after target")
    return target


def _dump(direction: str, data: bytes):
    get_logger().log(LogLevel.DEBUG, "DUMP", f"TrackedTarget {direction} ({len(data)} bytes)\n{hexdump(data)}")
