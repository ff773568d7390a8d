"""Wire layout and round-trip tests for the TrackedTarget codec."""
import unittest
import math
import struct
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src', 'python')))

from wpimath.geometry import Rotation3d, Transform3d, Translation3d

from photon_targeting.codec import (
    TARGET_FIXED_SIZE, encode_target, decode_target, encoded_size,
    serialize_target, deserialize_target
)
from photon_targeting.config import set_packet_dump
from photon_targeting.geometry import transform_to_bytes
from photon_targeting.logger import ILogger, LogLevel, set_logger
from photon_targeting.packet import Packet, PacketError
from photon_targeting.target import Corner, RectCorners, TrackedTarget

RECT = [(1, 1), (50, 1), (50, 50), (1, 50)]
CORNERS = [(2, 2), (49, 2), (49, 49), (2, 49)]
POSE = Transform3d(Translation3d(1.2, -0.4, 0.6), Rotation3d(0.05, -0.1, 2.9))
ALT_POSE = Transform3d(Translation3d(1.3, -0.35, 0.55), Rotation3d(-0.05, 0.1, 2.8))


class RecordingLogger(ILogger):
    def __init__(self):
        self.records = []

    def log(self, level, component, msg):
        self.records.append((level, component, msg))


def example_target(**overrides):
    args = dict(
        yaw=12.5, pitch=-3.2, area=4.1, skew=0.0,
        fiducial_id=7, obj_detect_class_id=-1, obj_detect_confidence=-1,
        best_camera_to_target=Transform3d(), alternate_camera_to_target=Transform3d(),
        pose_ambiguity=0.03, min_area_rect_corners=RECT, detected_corners=CORNERS,
    )
    args.update(overrides)
    return TrackedTarget(**args)


class TestGoldenLayout(unittest.TestCase):
    """Byte positions of every field."""

    def setUp(self):
        self.target = example_target(best_camera_to_target=POSE,
                                     alternate_camera_to_target=ALT_POSE)
        self.data = serialize_target(self.target)

    def test_length(self):
        self.assertEqual(TARGET_FIXED_SIZE, 232)
        self.assertEqual(len(self.data), 232 + 4 * 16)
        self.assertEqual(encoded_size(self.target), len(self.data))

    def test_scalars(self):
        self.assertEqual(self.data[0:32], struct.pack('<4d', 12.5, -3.2, 4.1, 0.0))
        self.assertEqual(self.data[32:36], struct.pack('<i', 7))
        self.assertEqual(self.data[36:40], b'\xff\xff\xff\xff')
        self.assertEqual(self.data[40:44], struct.pack('<f', -1.0))

    def test_transforms(self):
        self.assertEqual(self.data[44:100], transform_to_bytes(POSE))
        self.assertEqual(self.data[100:156], transform_to_bytes(ALT_POSE))

    def test_ambiguity_and_rect(self):
        self.assertEqual(self.data[156:164], struct.pack('<d', 0.03))
        expected = b''.join(struct.pack('<2d', x, y) for x, y in RECT)
        self.assertEqual(self.data[164:228], expected)

    def test_detected_corners_prefixed(self):
        self.assertEqual(struct.unpack_from('<I', self.data, 228)[0], 4)
        expected = b''.join(struct.pack('<2d', x, y) for x, y in CORNERS)
        self.assertEqual(self.data[232:], expected)

    def test_empty_detected_corners(self):
        data = serialize_target(example_target(detected_corners=[]))
        self.assertEqual(len(data), TARGET_FIXED_SIZE)
        self.assertEqual(data[-4:], b'\x00\x00\x00\x00')


class TestRoundTrip(unittest.TestCase):

    def assertRoundTrip(self, target):
        decoded = deserialize_target(serialize_target(target))
        self.assertEqual(decoded, target)
        return decoded

    def test_example_scenario(self):
        target = example_target()
        decoded = self.assertRoundTrip(target)
        self.assertEqual(decoded.yaw, 12.5)
        self.assertEqual(decoded.pitch, -3.2)
        self.assertEqual(decoded.area, 4.1)
        self.assertEqual(decoded.skew, 0.0)
        self.assertEqual(decoded.fiducial_id, 7)
        self.assertEqual(decoded.obj_detect_class_id, -1)
        self.assertEqual(decoded.obj_detect_confidence, -1.0)
        self.assertEqual(decoded.pose_ambiguity, 0.03)
        self.assertEqual([tuple(c) for c in decoded.min_area_rect_corners],
                         [(1.0, 1.0), (50.0, 1.0), (50.0, 50.0), (1.0, 50.0)])
        self.assertEqual([tuple(c) for c in decoded.detected_corners],
                         [(2.0, 2.0), (49.0, 2.0), (49.0, 49.0), (2.0, 49.0)])

    def test_real_poses(self):
        decoded = self.assertRoundTrip(example_target(best_camera_to_target=POSE,
                                                      alternate_camera_to_target=ALT_POSE))
        self.assertEqual(decoded.alternate_camera_to_target, ALT_POSE)

    def test_empty_placeholder(self):
        decoded = self.assertRoundTrip(TrackedTarget.empty())
        self.assertTrue(decoded.is_empty())

    def test_boundary_sentinels(self):
        for value in (-1.0, 0.0, 1.0):
            with self.subTest(value=value):
                self.assertRoundTrip(example_target(obj_detect_confidence=value,
                                                    pose_ambiguity=value))

    def test_sentinel_stays_distinguishable(self):
        unset = deserialize_target(serialize_target(example_target(obj_detect_confidence=-1)))
        zero = deserialize_target(serialize_target(example_target(obj_detect_confidence=0)))
        self.assertNotEqual(unset, zero)
        self.assertEqual(unset.obj_detect_confidence, -1.0)
        self.assertEqual(zero.obj_detect_confidence, 0.0)

    def test_non_representable_confidence(self):
        self.assertRoundTrip(example_target(obj_detect_confidence=0.87))

    def test_extreme_values(self):
        self.assertRoundTrip(example_target(
            yaw=-0.0, pitch=math.inf, area=100.0, skew=-1e-308,
            fiducial_id=2**31 - 1, obj_detect_class_id=-2**31))

    def test_nan_field(self):
        self.assertRoundTrip(example_target(skew=math.nan))

    def test_large_detected_corner_list(self):
        corners = [(i * 0.5, -i * 0.25) for i in range(5000)]
        decoded = self.assertRoundTrip(example_target(detected_corners=corners))
        self.assertEqual(len(decoded.detected_corners), 5000)
        self.assertEqual(tuple(decoded.detected_corners[4999]), (2499.5, -1249.75))

    def test_rect_always_four(self):
        decoded = self.assertRoundTrip(example_target(detected_corners=[]))
        self.assertEqual(len(decoded.min_area_rect_corners), 4)

    def test_rect_corners_holding_plain_tuples(self):
        """A RectCorners built from bare pairs is normalized to Corner values."""
        rect = RectCorners((1, 1), (50, 1), (50, 50), (1, 50))
        target = example_target(min_area_rect_corners=rect)
        self.assertIsInstance(target.min_area_rect_corners.c0, Corner)
        self.assertEqual(target, example_target())
        self.assertEqual(hash(target), hash(example_target()))
        decoded = self.assertRoundTrip(target)
        self.assertEqual(decoded.min_area_rect_corners.c2, Corner(50.0, 50.0))


class TestSharedPacket(unittest.TestCase):
    """Targets appended to one packet decode back in order."""

    def test_sequential_targets(self):
        first = example_target(fiducial_id=1)
        second = example_target(fiducial_id=2, detected_corners=[])
        packet = Packet()
        encode_target(packet, first)
        encode_target(packet, second)
        packet.encode_int32(99)

        self.assertEqual(decode_target(packet), first)
        self.assertEqual(decode_target(packet), second)
        self.assertEqual(packet.decode_int32(), 99)
        self.assertEqual(packet.remaining(), 0)

    def test_strict_rejects_trailing_bytes(self):
        data = serialize_target(example_target()) + b'\x00'
        self.assertEqual(deserialize_target(data), example_target())
        with self.assertRaises(PacketError):
            deserialize_target(data, strict=True)


class TestCodecLogging(unittest.TestCase):

    def setUp(self):
        self.logger = RecordingLogger()
        self.previous = set_logger(self.logger)

    def tearDown(self):
        set_logger(self.previous)
        set_packet_dump(False)

    def test_encode_does_not_trigger_pose_warning(self):
        serialize_target(TrackedTarget.empty())
        self.assertEqual(self.logger.records, [])

    def test_packet_dump(self):
        set_packet_dump(True)
        data = serialize_target(example_target())
        deserialize_target(data)
        self.assertEqual(len(self.logger.records), 2)
        for level, component, msg in self.logger.records:
            self.assertEqual(level, LogLevel.DEBUG)
            self.assertEqual(component, "DUMP")
            self.assertIn(f"({len(data)} bytes)", msg)


if __name__ == '__main__':
    unittest.main()
