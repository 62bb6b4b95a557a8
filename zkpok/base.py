"""
Fiat-Shamir helpers shared by provers and verifiers.
"""

from zkpok.consts import DEFAULT_HASH
from zkpok.encoding import encode_point
from zkpok.exceptions import SerializationError
from zkpok.utils.hashing import field_elem_from_try_and_incr


def write_compressed(writer, *points):
    """
    Write the compressed encodings of points, in order, to a file-like object.

    >>> import io
    >>> from petlib.ec import EcGroup
    >>> g = EcGroup().generator()
    >>> buf = io.BytesIO()
    >>> write_compressed(buf, g, g)
    >>> buf.getvalue() == 2 * g.export()
    True

    Args:
        writer: Object with a ``write(bytes)`` method.
        points: Group elements.

    Raises:
        SerializationError: if a point cannot be encoded, or the writer fails.
    """
    for pt in points:
        data = encode_point(pt, compressed=True)
        try:
            writer.write(data)
        except Exception as e:
            raise SerializationError(e) from e


def compute_random_oracle_challenge(challenge_bytes, group=None, hash_fn=DEFAULT_HASH):
    """
    Derive a Fiat-Shamir challenge from a transcript.

    >>> from petlib.ec import EcGroup
    >>> c = compute_random_oracle_challenge(b"transcript", EcGroup())
    >>> c == compute_random_oracle_challenge(b"transcript", EcGroup())
    True

    Args:
        challenge_bytes (bytes): Transcript, e.g. the output of a ``challenge_contribution``.
        group: Group whose order defines the challenge space.
        hash_fn: Constructor of a ``hashlib``-style hash object.
    """
    return field_elem_from_try_and_incr(bytes(challenge_bytes), group, hash_fn=hash_fn)
