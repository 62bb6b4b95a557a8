"""
Erasable secret values.

>>> from petlib.ec import EcGroup
>>> x = Secret(42, EcGroup(), name="x")
>>> x.value
42
>>> x.zeroize()
>>> x.erased
True
"""

import struct
import hashlib

from petlib.bn import Bn

from zkpok.consts import DEFAULT_GROUP
from zkpok.encoding import encode_scalar
from zkpok.exceptions import SecretErasedError


class Secret:
    """
    A secret scalar whose storage can be overwritten.

    The value lives in a fixed-width big-endian ``bytearray``. :py:meth:`zeroize` writes zeros
    over that same buffer. Each read of :py:attr:`value` builds a fresh ``Bn`` that the caller
    is responsible for dropping; the interpreter gives no way to wipe those copies.

    The buffer is also wiped when the object is garbage-collected.

    Args:
        value: Secret value, ``petlib.bn.Bn`` or ``int``. Reduced modulo the group order.
        group: Group whose order defines the scalar field.
        name: Optional name, useful for debugging.
    """

    # Number of bytes in a randomly-generated name of a secret.
    NUM_NAME_BYTES = 8

    def __init__(self, value, group=None, name=None):
        if group is None:
            group = DEFAULT_GROUP
        self._buf = bytearray(encode_scalar(value, group))
        self._erased = False
        if name is None:
            name = self._generate_unique_name()
        self.name = name

    def _generate_unique_name(self):
        h = struct.pack(">q", super().__hash__())
        return hashlib.sha256(h).hexdigest()[: self.NUM_NAME_BYTES * 4]

    @property
    def value(self):
        if self._erased:
            raise SecretErasedError("Secret {} was erased".format(self.name))
        return Bn.from_binary(bytes(self._buf))

    @property
    def erased(self):
        return self._erased

    def zeroize(self):
        """Overwrite the stored value with zeros. Idempotent."""
        buf = getattr(self, "_buf", None)
        if buf is not None:
            buf[:] = bytes(len(buf))
        self._erased = True

    def __del__(self):
        self.zeroize()

    def __repr__(self):
        # Never show the value.
        return "Secret(name={}, erased={})".format(repr(self.name), self._erased)
