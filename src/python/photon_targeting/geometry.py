from wpimath.geometry import Quaternion, Rotation3d, Transform3d, Translation3d

from .packet import Packet

# translation (x, y, z) + rotation quaternion (w, x, y, z), float64 each
TRANSFORM3D_SIZE = 7 * 8


def transform_components(transform: Transform3d) -> tuple:
    translation = transform.translation()
    q = transform.rotation().getQuaternion()
    return (translation.X(), translation.Y(), translation.Z(),
            q.W(), q.X(), q.Y(), q.Z())


def encode_transform3d(packet: Packet, transform: Transform3d):
    for value in transform_components(transform):
        packet.encode_float64(value)


def decode_transform3d(packet: Packet) -> Transform3d:
    # check up front so a short buffer never yields half a transform
    packet.require(TRANSFORM3D_SIZE)
    x = packet.decode_float64()
    y = packet.decode_float64()
    z = packet.decode_float64()
    qw = packet.decode_float64()
    qx = packet.decode_float64()
    qy = packet.decode_float64()
    qz = packet.decode_float64()
    return Transform3d(Translation3d(x, y, z), Rotation3d(Quaternion(qw, qx, qy, qz)))


def transform_to_bytes(transform: Transform3d) -> bytes:
    packet = Packet()
    encode_transform3d(packet, transform)
    return packet.get_data()


def is_identity(transform: Transform3d) -> bool:
    return transform == Transform3d()
