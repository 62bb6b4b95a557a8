"""
Deterministic hashing of byte strings to scalars and group elements.

Both functions use try-and-increment: hash the input, try to decode the digest, and on failure
hash the input again with an increasing counter appended. The number of attempts depends on the
input, so the running time leaks information about it.

.. WARNING ::

    Only pass public data, such as seeds for setup parameters or proof transcripts. Never pass
    secret bytes.
"""

import logging

from petlib.bn import Bn

from zkpok.consts import (
    ATTEMPT_SEPARATOR,
    DEFAULT_GROUP,
    DEFAULT_HASH,
    MAX_TRY_AND_INCR_ATTEMPTS,
)
from zkpok.encoding import decode_point, encode_point, order_size
from zkpok.exceptions import SerializationError, TryAndIncrementError
from zkpok.pairings import G2Group

logger = logging.getLogger(__name__)


def _digests(data, hash_fn, max_attempts):
    """
    Yield ``H(data)``, then ``H(data || "-attempt-" || j)`` for ``j = 1, 2, ...``.

    The counter ``j`` is encoded as 8 little-endian bytes.
    """
    yield hash_fn(data).digest()
    for j in range(1, max_attempts):
        yield hash_fn(data + ATTEMPT_SEPARATOR + j.to_bytes(8, "little")).digest()


def _give_up(kind, max_attempts):
    logger.error("Hashing to a %s failed after %d attempts", kind, max_attempts)
    raise TryAndIncrementError(
        "Could not hash to a {} in {} attempts".format(kind, max_attempts)
    )


def field_elem_from_random_bytes(digest, order):
    """
    Interpret bytes as a scalar, or return None if they do not encode one.

    Takes as many leading bytes as needed to encode the order, reads them as a little-endian
    integer, and clears the bits above the bit length of the order.

    >>> field_elem_from_random_bytes(b"\\x05\\x00", Bn(7))
    5
    >>> field_elem_from_random_bytes(b"\\x0f\\x00", Bn(7)) is None
    True
    """
    num_bytes = order_size(order)
    if len(digest) < num_bytes:
        raise ValueError(
            "Digest of {} bytes is too short for a {}-byte scalar".format(
                len(digest), num_bytes
            )
        )
    value = int.from_bytes(digest[:num_bytes], "little")
    value &= (1 << order.num_bits()) - 1
    if value >= int(order):
        return None
    return Bn.from_binary(value.to_bytes(num_bytes, "big"))


def field_elem_from_try_and_incr(
    data, group=None, hash_fn=DEFAULT_HASH, max_attempts=MAX_TRY_AND_INCR_ATTEMPTS
):
    """
    Hash bytes to a scalar modulo the group order.

    Not constant-time: use only with public inputs.

    >>> from petlib.ec import EcGroup
    >>> x = field_elem_from_try_and_incr(b"seed", EcGroup())
    >>> x == field_elem_from_try_and_incr(b"seed", EcGroup())
    True
    >>> 0 <= x < EcGroup().order()
    True

    Args:
        data (bytes): Public input.
        group: Group whose order defines the field.
        hash_fn: Constructor of a ``hashlib``-style hash object.
        max_attempts: Attempts before giving up with :py:class:`TryAndIncrementError`.
    """
    if group is None:
        group = DEFAULT_GROUP
    order = group.order()
    for attempt, digest in enumerate(_digests(data, hash_fn, max_attempts)):
        x = field_elem_from_random_bytes(digest, order)
        if x is not None:
            if attempt:
                logger.debug("Hashed to a scalar after %d retries", attempt)
            return x
    _give_up("scalar", max_attempts)


def group_elem_from_try_and_incr(
    data, group=None, hash_fn=DEFAULT_HASH, max_attempts=MAX_TRY_AND_INCR_ATTEMPTS
):
    """
    Hash bytes to a group element.

    Each digest is read as a compressed point: the leading bytes give the x coordinate and the
    lowest bit of the last byte selects the y coordinate. Requires a group with SEC1 compressed
    encodings, such as any ``petlib`` curve or the G1 group of :py:mod:`zkpok.pairings`. The
    curves in use have cofactor one, so the decoded point needs no cofactor clearing.

    Not constant-time: use only with public inputs.

    >>> from petlib.ec import EcGroup, EcPt
    >>> h = group_elem_from_try_and_incr(b"h", EcGroup())
    >>> isinstance(h, EcPt)
    True
    >>> h == group_elem_from_try_and_incr(b"h", EcGroup())
    True

    Args:
        data (bytes): Public input.
        group: Target group.
        hash_fn: Constructor of a ``hashlib``-style hash object.
        max_attempts: Attempts before giving up with :py:class:`TryAndIncrementError`.

    Raises:
        TypeError: If the group is the G2 group of :py:mod:`zkpok.pairings`.
    """
    if group is None:
        group = DEFAULT_GROUP
    if isinstance(group, G2Group):
        raise TypeError(
            "G2 points have no compressed SEC1 encoding; hash to G1 or to a petlib curve"
        )
    x_len = len(encode_point(group.generator(), compressed=True)) - 1
    for attempt, digest in enumerate(_digests(data, hash_fn, max_attempts)):
        if len(digest) < x_len:
            raise ValueError(
                "Digest of {} bytes is too short for a {}-byte coordinate".format(
                    len(digest), x_len
                )
            )
        prefix = b"\x03" if digest[-1] & 1 else b"\x02"
        try:
            pt = decode_point(prefix + digest[:x_len], group)
        except SerializationError:
            continue
        if attempt:
            logger.debug("Hashed to a group element after %d retries", attempt)
        return pt
    _give_up("group element", max_attempts)
