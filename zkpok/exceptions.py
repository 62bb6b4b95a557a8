"""
Common exception classes.
"""


class ZkPokError(Exception):
    """Base class for all errors raised by this library."""


class ExpectedSameSizeSequences(ZkPokError):
    """Two sequences that should align have different lengths."""

    def __init__(self, expected, actual):
        super().__init__(
            "Expected sequences of the same size: {} != {}".format(expected, actual)
        )
        self.expected = expected
        self.actual = actual


class IndexOutOfBounds(ZkPokError):
    """Index is not smaller than the bound."""

    def __init__(self, index, bound):
        super().__init__("Index {} out of bounds (bound: {})".format(index, bound))
        self.index = index
        self.bound = bound


class InvalidResponse(ZkPokError):
    """A response does not satisfy the verification equation."""


class SerializationError(ZkPokError):
    """
    Encoding or decoding failed, or the output sink rejected a write.

    Args:
        underlying: The original exception raised by the encoder, decoder, or sink.
    """

    def __init__(self, underlying):
        super().__init__("Serialization failed: {!r}".format(underlying))
        self.underlying = underlying


class ValueMustNotBeEqual(ZkPokError):
    """Two values are equal where they should differ."""


class InvalidProofOfEquality(ZkPokError):
    """Proof of equality of discrete logarithms does not verify."""


class TryAndIncrementError(ZkPokError):
    """Hashing to a field or group element did not succeed within the allowed attempts."""


class SamplingError(ZkPokError):
    """Rejection sampling did not produce a value within the allowed attempts."""


class ProtocolConsumedError(ZkPokError):
    """The prover state was already used to produce a proof, or was erased."""


class SecretErasedError(ZkPokError):
    """Secret value was read after it had been zeroized."""


def check_same_size(expected, actual):
    """
    Raise :py:class:`ExpectedSameSizeSequences` if the lengths differ.

    >>> check_same_size([1, 2], [3, 4])
    >>> check_same_size([1, 2], [3])
    Traceback (most recent call last):
    ...
    zkpok.exceptions.ExpectedSameSizeSequences: Expected sequences of the same size: 2 != 1
    """
    if len(expected) != len(actual):
        raise ExpectedSameSizeSequences(len(expected), len(actual))


def check_index(index, bound):
    """
    Raise :py:class:`IndexOutOfBounds` unless ``0 <= index < bound``.

    >>> check_index(0, 1)
    >>> check_index(3, 3)
    Traceback (most recent call last):
    ...
    zkpok.exceptions.IndexOutOfBounds: Index 3 out of bounds (bound: 3)
    """
    if not 0 <= index < bound:
        raise IndexOutOfBounds(index, bound)
