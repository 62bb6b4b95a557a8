"""
Canonical byte encodings of group elements and scalars.

Points are encoded with the export format of the underlying library: SEC1 octet strings for
``petlib`` curves and ``bplib`` G1, the native ``bplib`` format for G2. Scalars are encoded as
big-endian integers, zero-padded to the byte length of the group order.

Every failure is reported as :py:class:`zkpok.exceptions.SerializationError`, with the original
exception attached.

>>> from petlib.ec import EcGroup
>>> group = EcGroup()
>>> g = group.generator()
>>> decode_point(encode_point(g), group) == g
True
>>> len(encode_point(g, compressed=False)) == 2 * len(encode_point(g)) - 1
True
>>> decode_scalar(encode_scalar(42, group), group)
42
"""

from petlib.bn import Bn
from petlib.ec import EcGroup, EcPt

from zkpok.exceptions import SerializationError

# OpenSSL point_conversion_form_t values.
POINT_CONVERSION_COMPRESSED = 2
POINT_CONVERSION_UNCOMPRESSED = 4


def point_form(compressed):
    return POINT_CONVERSION_COMPRESSED if compressed else POINT_CONVERSION_UNCOMPRESSED


def encode_point(pt, compressed=True):
    """
    Encode a group element.

    Args:
        pt: ``petlib.ec.EcPt``, or a point of :py:mod:`zkpok.pairings`.
        compressed (bool): Whether to use the compressed form.
    """
    try:
        return pt.export(point_form(compressed))
    except Exception as e:
        raise SerializationError(e) from e


def decode_point(data, group):
    """
    Decode a group element. Accepts both compressed and uncompressed forms.

    Args:
        data (bytes): Encoded point.
        group: ``petlib.ec.EcGroup``, or a group of :py:mod:`zkpok.pairings`.
    """
    try:
        if isinstance(group, EcGroup):
            return EcPt.from_binary(data, group)
        return group.point_from_bytes(data)
    except Exception as e:
        raise SerializationError(e) from e


def order_size(order):
    """
    Byte length of ``order``, the width of every scalar below it.

    >>> order_size(Bn(255)), order_size(Bn(256)), order_size(Bn(257))
    (1, 2, 2)
    """
    return (order.num_bits() + 7) // 8


def scalar_size(group):
    """Number of bytes in an encoded scalar of the group."""
    return order_size(group.order())


def encode_scalar(x, group):
    """
    Encode a scalar, reduced modulo the group order.

    Args:
        x: ``petlib.bn.Bn`` or ``int``.
        group: Group that defines the scalar field.
    """
    try:
        if not isinstance(x, Bn):
            x = Bn.from_decimal(str(int(x)))
        raw = (x % group.order()).binary()
    except Exception as e:
        raise SerializationError(e) from e
    return raw.rjust(scalar_size(group), b"\x00")


def decode_scalar(data, group):
    """
    Decode a scalar. Rejects wrong lengths and non-reduced values.

    Args:
        data (bytes): Encoded scalar.
        group: Group that defines the scalar field.
    """
    size = scalar_size(group)
    if len(data) != size:
        raise SerializationError(
            ValueError("Expected {} bytes for a scalar, got {}".format(size, len(data)))
        )
    x = Bn.from_binary(bytes(data))
    if x >= group.order():
        raise SerializationError(ValueError("Scalar is not reduced modulo the group order"))
    return x
