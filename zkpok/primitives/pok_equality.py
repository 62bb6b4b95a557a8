r"""
ZK proof of knowledge of two discrete logarithms satisfying two relations at once.

Given public points :math:`y_1, y_2, a_1, a_2, b_1, b_2`, the prover shows knowledge of
:math:`x_1, x_2` such that

.. math::
    PK\{ (x_1, x_2): y_1 = x_1 a_1 + x_2 a_2 \land y_2 = x_1 b_1 + x_2 b_2 \}

1. The prover picks blindings :math:`r_1, r_2` and commits to :math:`t_1 = r_1 a_1 + r_2 a_2`,
   :math:`t_2 = r_1 b_1 + r_2 b_2`.
2. The public points and the commitments are hashed into a challenge :math:`c`.
3. The prover answers :math:`s_1 = r_1 + c x_1`, :math:`s_2 = r_2 + c x_2`.
4. The verifier checks :math:`s_1 a_1 + s_2 a_2 - c y_1 = t_1` and
   :math:`s_1 b_1 + s_2 b_2 - c y_2 = t_2`.

A prover state answers exactly one challenge. Two responses with the same blindings for two
different challenges reveal both secrets.

Example usage:

>>> import io
>>> from petlib.ec import EcGroup
>>> from zkpok.base import compute_random_oracle_challenge
>>> group = EcGroup()
>>> g = group.generator()
>>> a1, a2, b1, b2 = g, 2 * g, 3 * g, g
>>> y1, y2 = 19 * g, 22 * g
>>> protocol = PokProtocol.init(5, 11, a1, a2, 7, 13, b1, b2)
>>> transcript = io.BytesIO()
>>> protocol.challenge_contribution(a1, a2, b1, b2, y1, y2, transcript)
>>> challenge = compute_random_oracle_challenge(transcript.getvalue(), group)
>>> proof = protocol.gen_proof(challenge)
>>> proof.verify(y1, y2, a1, a2, b1, b2, challenge)
True
"""

import json
import logging
import warnings

import attr
import msgpack
import petlib.pack as pack

from zkpok.base import write_compressed
from zkpok.encoding import decode_point, decode_scalar, encode_point, encode_scalar
from zkpok.exceptions import ProtocolConsumedError, SerializationError
from zkpok.expr import Secret
from zkpok.utils import ensure_bn

logger = logging.getLogger(__name__)

PROOF_FIELDS = ("t1", "t2", "response1", "response2")


class PokProtocol:
    """
    Prover state of the proof of knowledge of two discrete logarithms.

    Create it with :py:meth:`init`. The state holds the commitments :math:`t_1, t_2`, which are
    public, and the witnesses and blindings, which are secret. The secrets are erased when a proof
    is generated, when :py:meth:`zeroize` is called, when a ``with`` block around the state exits,
    and when the state is garbage-collected, whichever happens first.

    >>> from petlib.ec import EcGroup
    >>> g = EcGroup().generator()
    >>> with PokProtocol.init(5, 11, g, 2 * g, 7, 13, 3 * g, g) as protocol:
    ...     protocol.consumed
    False
    >>> protocol.consumed
    True
    """

    def __init__(self, t1, t2, witness1, blinding1, witness2, blinding2, order):
        self._t1 = t1
        self._t2 = t2
        self._witness1 = witness1
        self._blinding1 = blinding1
        self._witness2 = witness2
        self._blinding2 = blinding2
        self._order = order
        self._consumed = False

    @classmethod
    def init(cls, witness1, blinding1, a1, a2, witness2, blinding2, b1, b2):
        """
        Commit to the blindings.

        The witnesses are not checked against any public value. Inconsistent witnesses produce a
        proof that does not verify.

        Args:
            witness1: Secret :math:`x_1`.
            blinding1: Blinding :math:`r_1`. Must be uniformly random and never reused, see
                :py:func:`zkpok.utils.rand`.
            a1: Generator multiplied by :math:`x_1` in the first relation.
            a2: Generator multiplied by :math:`x_2` in the first relation.
            witness2: Secret :math:`x_2`.
            blinding2: Blinding :math:`r_2`, same requirements as ``blinding1``.
            b1: Generator multiplied by :math:`x_1` in the second relation.
            b2: Generator multiplied by :math:`x_2` in the second relation.
        """
        group = a1.group
        order = group.order()
        witness1 = Secret(witness1, group, name="witness1")
        blinding1 = Secret(blinding1, group, name="blinding1")
        witness2 = Secret(witness2, group, name="witness2")
        blinding2 = Secret(blinding2, group, name="blinding2")

        r1, r2 = blinding1.value, blinding2.value
        t1 = group.wsum([r1, r2], [a1, a2])
        t2 = b1.group.wsum([r1, r2], [b1, b2])
        del r1, r2

        logger.debug("Committed to blindings of a proof of knowledge of equality")
        return cls(t1, t2, witness1, blinding1, witness2, blinding2, order)

    @property
    def t1(self):
        return self._t1

    @property
    def t2(self):
        return self._t2

    @property
    def consumed(self):
        """Whether the secrets were used or erased. A consumed state cannot produce a proof."""
        return self._consumed

    def challenge_contribution(self, a1, a2, b1, b2, y1, y2, writer):
        """
        Write this prover's part of the Fiat-Shamir transcript.

        The transcript depends on public data only, and the method can be called any number of
        times, also after the state was consumed. Unless Python runs with ``-O``, a state that
        still holds its witnesses also checks them against ``y1`` and ``y2`` and warns on a
        mismatch. That check reads the secrets and is not constant-time.

        Args:
            a1, a2, b1, b2: Generators, as passed to :py:meth:`init`.
            y1, y2: Public values of the two relations.
            writer: Object with a ``write(bytes)`` method.

        Raises:
            SerializationError: if a point cannot be encoded, or the writer fails.
        """
        if __debug__ and not self._consumed:
            self._warn_if_inconsistent(a1, a2, b1, b2, y1, y2)
        self.compute_challenge_contribution(
            a1, a2, b1, b2, y1, y2, self._t1, self._t2, writer
        )

    @staticmethod
    def compute_challenge_contribution(a1, a2, b1, b2, y1, y2, t1, t2, writer):
        """
        Write the transcript: compressed ``a1, a2, b1, b2, y1, y2, t1, t2``, in this order.

        Prover and verifier must produce the same bytes. Changing the order breaks
        interoperability.
        """
        write_compressed(writer, a1, a2, b1, b2, y1, y2, t1, t2)

    def _warn_if_inconsistent(self, a1, a2, b1, b2, y1, y2):
        x1, x2 = self._witness1.value, self._witness2.value
        consistent = (
            a1.group.wsum([x1, x2], [a1, a2]) == y1
            and b1.group.wsum([x1, x2], [b1, b2]) == y2
        )
        del x1, x2
        if not consistent:
            warnings.warn(
                "Witnesses do not satisfy the public values; the proof will not verify"
            )

    def gen_proof(self, challenge):
        """
        Answer the challenge and erase the secrets.

        Args:
            challenge: Challenge scalar, e.g. from
                :py:func:`zkpok.base.compute_random_oracle_challenge`.

        Returns:
            :py:class:`PokProof`

        Raises:
            ProtocolConsumedError: if this state already produced a proof or was erased.
        """
        if self._consumed:
            raise ProtocolConsumedError(
                "Prover state was already consumed; create a new one with fresh blindings"
            )
        try:
            challenge = ensure_bn(challenge)
            response1 = (
                self._blinding1.value + self._witness1.value * challenge
            ) % self._order
            response2 = (
                self._blinding2.value + self._witness2.value * challenge
            ) % self._order
        finally:
            self.zeroize()

        logger.debug("Generated a proof of knowledge of equality")
        return PokProof(
            t1=self._t1, t2=self._t2, response1=response1, response2=response2
        )

    def zeroize(self):
        """Erase the witnesses and blindings. The state can no longer produce a proof."""
        for secret in (
            getattr(self, "_witness1", None),
            getattr(self, "_blinding1", None),
            getattr(self, "_witness2", None),
            getattr(self, "_blinding2", None),
        ):
            if secret is not None:
                secret.zeroize()
        self._consumed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.zeroize()
        return False

    def __del__(self):
        self.zeroize()

    def __repr__(self):
        return "PokProtocol(t1={!r}, t2={!r}, consumed={})".format(
            self._t1, self._t2, self._consumed
        )


@attr.s
class PokProof:
    """
    Proof of knowledge of two discrete logarithms.

    Holds only public values. Equality is field-wise.
    """

    t1 = attr.ib()
    t2 = attr.ib()
    response1 = attr.ib()
    response2 = attr.ib()

    @property
    def group(self):
        return self.t1.group

    def challenge_contribution(self, a1, a2, b1, b2, y1, y2, writer):
        """
        Write the Fiat-Shamir transcript, byte-for-byte as the prover did.

        See :py:meth:`PokProtocol.challenge_contribution`.
        """
        PokProtocol.compute_challenge_contribution(
            a1, a2, b1, b2, y1, y2, self.t1, self.t2, writer
        )

    def verify(self, y1, y2, a1, a2, b1, b2, challenge):
        """
        Check the proof against the statement and the challenge.

        An invalid proof is an expected outcome, not an error.

        Returns:
            bool: True if both relations verify.
        """
        challenge = ensure_bn(challenge)
        responses = [ensure_bn(self.response1), ensure_bn(self.response2)]
        minus_c1 = (-challenge) % a1.group.order()
        minus_c2 = (-challenge) % b1.group.order()

        valid1 = a1.group.wsum(responses + [minus_c1], [a1, a2, y1]) == self.t1
        valid2 = b1.group.wsum(responses + [minus_c2], [b1, b2, y2]) == self.t2
        if not (valid1 and valid2):
            logger.debug(
                "Proof of knowledge of equality rejected (first relation: %s, second: %s)",
                valid1,
                valid2,
            )
        return valid1 and valid2

    def _encoded_fields(self, compressed):
        group = self.group
        return [
            encode_point(self.t1, compressed),
            encode_point(self.t2, compressed),
            encode_scalar(self.response1, group),
            encode_scalar(self.response2, group),
        ]

    @classmethod
    def _from_encoded_fields(cls, fields, group):
        if len(fields) != len(PROOF_FIELDS):
            raise SerializationError(
                ValueError(
                    "Expected {} proof fields, got {}".format(
                        len(PROOF_FIELDS), len(fields)
                    )
                )
            )
        t1, t2, s1, s2 = fields
        return cls(
            t1=decode_point(t1, group),
            t2=decode_point(t2, group),
            response1=decode_scalar(s1, group),
            response2=decode_scalar(s2, group),
        )

    def to_bytes(self, compressed=True):
        """
        Encode as a msgpack array of the canonical encodings of ``t1, t2, response1, response2``.

        Args:
            compressed (bool): Encoding form of the points.
        """
        return msgpack.packb(self._encoded_fields(compressed), use_bin_type=True)

    @classmethod
    def from_bytes(cls, data, group):
        """
        Decode the output of :py:meth:`to_bytes`, in either form.

        Args:
            data (bytes): Encoded proof.
            group: Group of the points.

        Raises:
            SerializationError: if the data is malformed.
        """
        try:
            fields = msgpack.unpackb(data, raw=False)
        except Exception as e:
            raise SerializationError(e) from e
        if not isinstance(fields, (list, tuple)) or not all(
            isinstance(f, bytes) for f in fields
        ):
            raise SerializationError(ValueError("Expected an array of byte strings"))
        return cls._from_encoded_fields(fields, group)

    def to_dict(self, compressed=True):
        """Map field names to hex-encoded canonical encodings."""
        return {
            name: value.hex()
            for name, value in zip(PROOF_FIELDS, self._encoded_fields(compressed))
        }

    @classmethod
    def from_dict(cls, d, group):
        """
        Decode the output of :py:meth:`to_dict`.

        Raises:
            SerializationError: if a field is missing or malformed.
        """
        try:
            fields = [bytes.fromhex(d[name]) for name in PROOF_FIELDS]
        except (KeyError, TypeError, ValueError) as e:
            raise SerializationError(e) from e
        return cls._from_encoded_fields(fields, group)

    def to_json(self, compressed=True):
        return json.dumps(self.to_dict(compressed), sort_keys=True)

    @classmethod
    def from_json(cls, data, group):
        try:
            d = json.loads(data)
        except ValueError as e:
            raise SerializationError(e) from e
        if not isinstance(d, dict):
            raise SerializationError(ValueError("Expected a JSON object"))
        return cls.from_dict(d, group)


def proof_enc(obj):
    """Encoder for proofs. Points carry their group, so decoding needs no context."""
    return pack.encode([obj.t1, obj.t2, obj.response1, obj.response2])


def proof_dec(data):
    """Decoder for proofs."""
    t1, t2, response1, response2 = pack.decode(data)
    return PokProof(t1=t1, t2=t2, response1=response1, response2=response2)


pack.register_coders(PokProof, 120, proof_enc, proof_dec)
