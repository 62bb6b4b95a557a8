"""
Proof of knowledge of two discrete logarithms satisfying two relations:
PK{ (x1, x2): y1 = x1 * a1 + x2 * a2 and y2 = x1 * b1 + x2 * b2 }
"""

import io

from petlib.ec import EcGroup

from zkpok import PokProtocol, PokProof, compute_random_oracle_challenge, make_generators, rand

group = EcGroup()

# Create the base points on the curve.
a1, a2, b1, b2 = make_generators(4, group, seed=b"example")

# Preparing the secrets.
x1 = rand(group=group)
x2 = rand(group=group)

# Public values, "left-hand sides".
y1 = group.wsum([x1, x2], [a1, a2])
y2 = group.wsum([x1, x2], [b1, b2])

# Prover: commit with fresh blindings, derive the challenge, respond.
protocol = PokProtocol.init(x1, rand(group=group), a1, a2, x2, rand(group=group), b1, b2)
transcript = io.BytesIO()
protocol.challenge_contribution(a1, a2, b1, b2, y1, y2, transcript)
challenge = compute_random_oracle_challenge(transcript.getvalue(), group)
data = protocol.gen_proof(challenge).to_bytes()

# Verifier: decode, rebuild the same challenge, check.
proof = PokProof.from_bytes(data, group)
transcript = io.BytesIO()
proof.challenge_contribution(a1, a2, b1, b2, y1, y2, transcript)
challenge = compute_random_oracle_challenge(transcript.getvalue(), group)
assert proof.verify(y1, y2, a1, a2, b1, b2, challenge)
