import gc
import io
import json

import attr
import msgpack
import pytest

from petlib import pack
from petlib.bn import Bn
from petlib.ec import EcPt

from zkpok.base import compute_random_oracle_challenge
from zkpok.exceptions import ProtocolConsumedError, SerializationError, SecretErasedError
from zkpok.primitives.pok_equality import PokProtocol, PokProof
from zkpok.utils import n_rand, rand
from zkpok.utils.debug import SigmaProtocol


def make_statement(group, rng):
    """Random generators and witnesses, with the matching public values."""
    a1, a2, b1, b2 = n_rand(rng, 4, group, as_point=True)
    x1, x2 = n_rand(rng, 2, group)
    y1 = group.wsum([x1, x2], [a1, a2])
    y2 = group.wsum([x1, x2], [b1, b2])
    return (x1, x2), (y1, y2, a1, a2, b1, b2)


def transcript_of(obj, statement):
    y1, y2, a1, a2, b1, b2 = statement
    buf = io.BytesIO()
    obj.challenge_contribution(a1, a2, b1, b2, y1, y2, buf)
    return buf.getvalue()


def prove(group, rng, witnesses, statement):
    """Run the prover and return the proof, the challenge, and the prover transcript."""
    x1, x2 = witnesses
    y1, y2, a1, a2, b1, b2 = statement
    r1, r2 = n_rand(rng, 2, group)
    protocol = PokProtocol.init(x1, r1, a1, a2, x2, r2, b1, b2)
    transcript = transcript_of(protocol, statement)
    challenge = compute_random_oracle_challenge(transcript, group)
    return protocol.gen_proof(challenge), challenge, transcript


@pytest.fixture
def proven(group, rng):
    witnesses, statement = make_statement(group, rng)
    proof, challenge, transcript = prove(group, rng, witnesses, statement)
    return proof, challenge, statement


def test_pok_equality_non_interactive(any_group, rng):
    witnesses, statement = make_statement(any_group, rng)
    proof, challenge_prover, transcript_prover = prove(
        any_group, rng, witnesses, statement
    )

    # Verifier side.
    transcript_verifier = transcript_of(proof, statement)
    challenge_verifier = compute_random_oracle_challenge(transcript_verifier, any_group)

    assert proof.verify(*statement, challenge_verifier)
    assert transcript_prover == transcript_verifier
    assert challenge_prover == challenge_verifier


@pytest.mark.parametrize("challenge", [0, 1, 2 ** 64 + 3])
def test_pok_equality_any_challenge(group, rng, challenge):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(x1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2)
    proof = protocol.gen_proof(challenge)
    assert proof.verify(*statement, challenge)


def test_pok_equality_interactive(any_group, rng):
    (x1, x2), statement = make_statement(any_group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    prover = PokProtocol.init(
        x1, rand(rng, any_group), a1, a2, x2, rand(rng, any_group), b1, b2
    )
    protocol = SigmaProtocol(statement, prover, rng=rng)
    assert protocol.verify()


def test_pok_equality_concrete_scenario(group):
    g = group.generator()
    a1, a2, b1, b2 = g, 2 * g, 3 * g, g
    x1, x2 = 5, 7
    y1 = 19 * g
    y2 = 22 * g
    assert y1 == x1 * a1 + x2 * a2
    assert y2 == x1 * b1 + x2 * b2

    protocol = PokProtocol.init(x1, 11, a1, a2, x2, 13, b1, b2)
    assert protocol.t1 == 11 * a1 + 13 * a2
    assert protocol.t2 == 11 * b1 + 13 * b2

    transcript = io.BytesIO()
    protocol.challenge_contribution(a1, a2, b1, b2, y1, y2, transcript)
    challenge = compute_random_oracle_challenge(transcript.getvalue(), group)
    proof = protocol.gen_proof(challenge)

    order = group.order()
    assert proof.response1 == (Bn(11) + Bn(5) * challenge) % order
    assert proof.response2 == (Bn(13) + Bn(7) * challenge) % order
    assert proof.verify(y1, y2, a1, a2, b1, b2, challenge)
    assert not proof.verify(20 * g, y2, a1, a2, b1, b2, challenge)


def test_pok_equality_transcript_order(group, rng):
    witnesses, statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    proof, _, transcript = prove(group, rng, witnesses, statement)

    expected = b"".join(
        pt.export() for pt in [a1, a2, b1, b2, y1, y2, proof.t1, proof.t2]
    )
    assert transcript == expected


def test_pok_equality_transcript_is_repeatable(group, rng):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(x1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2)
    first = transcript_of(protocol, statement)
    second = transcript_of(protocol, statement)
    protocol.gen_proof(1)

    # Only public data is read, so the transcript survives consumption.
    assert first == second == transcript_of(protocol, statement)


@pytest.mark.parametrize(
    "field", ["t1", "t2", "response1", "response2"],
)
def test_pok_equality_tampered_proof(group, proven, field):
    proof, challenge, statement = proven
    value = getattr(proof, field)
    if isinstance(value, EcPt):
        tampered = value + group.generator()
    else:
        tampered = (value + 1) % group.order()
    bad_proof = attr.evolve(proof, **{field: tampered})
    assert not bad_proof.verify(*statement, challenge)


@pytest.mark.parametrize("index", range(6))
def test_pok_equality_tampered_statement(group, rng, proven, index):
    proof, challenge, statement = proven
    statement = list(statement)
    statement[index] = statement[index] + rand(rng, group, as_point=True)
    assert not proof.verify(*statement, challenge)


def test_pok_equality_tampered_challenge(group, proven):
    proof, challenge, statement = proven
    assert not proof.verify(*statement, challenge + 1)


def test_pok_equality_wrong_witnesses(group, rng):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(
        x1 + 1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2
    )
    with pytest.warns(UserWarning):
        transcript = transcript_of(protocol, statement)
    challenge = compute_random_oracle_challenge(transcript, group)
    proof = protocol.gen_proof(challenge)
    assert not proof.verify(*statement, challenge)


def test_pok_equality_witness_check_stops_after_proof(group, rng, recwarn):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(
        x1 + 1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2
    )
    with pytest.warns(UserWarning):
        before = transcript_of(protocol, statement)
    proof = protocol.gen_proof(1)
    recwarn.clear()

    after = transcript_of(protocol, statement)

    assert len(recwarn) == 0
    assert before == after == transcript_of(proof, statement)


def test_pok_equality_single_witness(group, rng):
    """With the identity as second generators, the proof covers a single discrete log."""
    x, r = rand(rng, group), rand(rng, group)
    a, b = rand(rng, group, as_point=True), rand(rng, group, as_point=True)
    inf = group.infinite()
    statement = (x * a, x * b, a, inf, b, inf)
    proof, _, _ = prove(group, rng, (x, r), statement)
    challenge = compute_random_oracle_challenge(transcript_of(proof, statement), group)
    assert proof.verify(*statement, challenge)


def test_pok_equality_second_proof_fails(group, rng):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(x1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2)
    assert not protocol.consumed
    protocol.gen_proof(rand(rng, group))
    assert protocol.consumed

    with pytest.raises(ProtocolConsumedError):
        protocol.gen_proof(rand(rng, group))


def secrets_of(protocol):
    return [
        protocol._witness1,
        protocol._blinding1,
        protocol._witness2,
        protocol._blinding2,
    ]


def assert_erased(secrets, originals):
    for secret, original in zip(secrets, originals):
        assert secret.erased
        assert bytes(secret._buf) == bytes(len(original))
        assert original not in bytes(secret._buf)
        with pytest.raises(SecretErasedError):
            secret.value


def test_pok_equality_secrets_erased_after_proof(group, rng):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(x1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2)
    secrets = secrets_of(protocol)
    originals = [bytes(s._buf) for s in secrets]
    assert all(any(original) for original in originals)

    protocol.gen_proof(rand(rng, group))
    assert_erased(secrets, originals)


def test_pok_equality_secrets_erased_on_bad_challenge(group, rng):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(x1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2)
    secrets = secrets_of(protocol)
    originals = [bytes(s._buf) for s in secrets]

    with pytest.raises(TypeError):
        protocol.gen_proof("not a challenge")
    assert_erased(secrets, originals)
    assert protocol.consumed


def test_pok_equality_secrets_erased_when_dropped(group, rng):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    protocol = PokProtocol.init(x1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2)
    secrets = secrets_of(protocol)
    originals = [bytes(s._buf) for s in secrets]

    del protocol
    gc.collect()
    assert_erased(secrets, originals)


def test_pok_equality_secrets_erased_by_context_manager(group, rng):
    (x1, x2), statement = make_statement(group, rng)
    y1, y2, a1, a2, b1, b2 = statement
    with PokProtocol.init(
        x1, rand(rng, group), a1, a2, x2, rand(rng, group), b1, b2
    ) as protocol:
        secrets = secrets_of(protocol)
        originals = [bytes(s._buf) for s in secrets]
        transcript = transcript_of(protocol, statement)

    assert_erased(secrets, originals)
    with pytest.raises(ProtocolConsumedError):
        protocol.gen_proof(compute_random_oracle_challenge(transcript, group))


def test_pok_equality_repr_hides_secrets(group):
    g = group.generator()
    protocol = PokProtocol.init(123456789, 987654321, g, g, 5, 6, g, g)
    assert "123456789" not in repr(protocol)
    assert "987654321" not in repr(protocol)


@pytest.mark.parametrize("compressed", [True, False])
def test_pok_proof_bytes(group, proven, compressed):
    proof, challenge, statement = proven
    data = proof.to_bytes(compressed=compressed)
    decoded = PokProof.from_bytes(data, group)
    assert decoded == proof
    assert decoded.to_bytes(compressed=compressed) == data
    assert decoded.verify(*statement, challenge)


def test_pok_proof_compressed_is_shorter(proven):
    proof, _, _ = proven
    assert len(proof.to_bytes()) < len(proof.to_bytes(compressed=False))


def test_pok_proof_json(group, proven):
    proof, _, _ = proven
    data = proof.to_json()
    assert set(json.loads(data)) == {"t1", "t2", "response1", "response2"}
    decoded = PokProof.from_json(data, group)
    assert decoded == proof
    assert decoded.to_json() == data


def test_pok_proof_pack(proven):
    proof, _, _ = proven
    data = pack.encode(proof)
    decoded = pack.decode(data)
    assert isinstance(decoded, PokProof)
    assert decoded == proof
    assert pack.encode(decoded) == data


def test_pok_proof_pack_nested(proven):
    # petlib.pack.decode passes ``encoding`` to msgpack.unpackb.
    assert msgpack.version < (1, 0)
    proof, _, _ = proven
    assert pack.decode(pack.encode([proof, proof.response1])) == [proof, proof.response1]


def test_pok_proof_pack_pairing(group_pair, rng):
    G1 = group_pair.G1
    witnesses, statement = make_statement(G1, rng)
    proof, _, _ = prove(G1, rng, witnesses, statement)
    assert pack.decode(pack.encode(proof)) == proof


@pytest.mark.parametrize(
    "data", [b"", b"\xc1", b"\x93\xc4\x01\x00\xc4\x01\x00\xc4\x01\x00", b"\x01"],
)
def test_pok_proof_from_bytes_malformed(group, data):
    with pytest.raises(SerializationError):
        PokProof.from_bytes(data, group)


def test_pok_proof_from_bytes_bad_point(group, proven):
    proof, _, _ = proven
    fields = proof.to_dict()
    fields["t1"] = "02" + "ff" * (len(fields["t1"]) // 2 - 1)
    with pytest.raises(SerializationError):
        PokProof.from_dict(fields, group)


def test_pok_proof_from_bytes_unreduced_scalar(group, proven):
    proof, _, _ = proven
    fields = proof.to_dict()
    fields["response1"] = "ff" * (len(fields["response1"]) // 2)
    with pytest.raises(SerializationError):
        PokProof.from_dict(fields, group)


@pytest.mark.parametrize(
    "data",
    [
        "",
        "[]",
        '{"t1": "00"}',
        '{"t1": 1, "t2": 2, "response1": 3, "response2": 4}',
    ],
)
def test_pok_proof_from_json_malformed(group, data):
    with pytest.raises(SerializationError):
        PokProof.from_json(data, group)


class FixedCapacitySink:
    def __init__(self, capacity):
        self.capacity = capacity
        self.data = bytearray()

    def write(self, b):
        if len(self.data) + len(b) > self.capacity:
            raise OSError("Sink is full")
        self.data.extend(b)
        return len(b)


def test_pok_equality_sink_overflow(group, proven):
    proof, _, statement = proven
    y1, y2, a1, a2, b1, b2 = statement
    sink = FixedCapacitySink(3 * len(a1.export()))
    with pytest.raises(SerializationError) as excinfo:
        proof.challenge_contribution(a1, a2, b1, b2, y1, y2, sink)
    assert isinstance(excinfo.value.underlying, OSError)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_pok_equality_sink_closed(group, proven):
    proof, _, statement = proven
    y1, y2, a1, a2, b1, b2 = statement
    sink = io.BytesIO()
    sink.close()
    with pytest.raises(SerializationError):
        proof.challenge_contribution(a1, a2, b1, b2, y1, y2, sink)


def test_pok_equality_unencodable_point(group, proven):
    proof, _, statement = proven
    y1, y2, a1, a2, b1, b2 = statement
    with pytest.raises(SerializationError):
        proof.challenge_contribution(a1, a2, b1, b2, y1, object(), io.BytesIO())
