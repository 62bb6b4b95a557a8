"""
The same proof over the G2 group of a pairing-friendly curve, exchanged with ``petlib.pack``.
"""

import io

from petlib import pack

from zkpok import PokProtocol, compute_random_oracle_challenge, n_rand
from zkpok.pairings import BilinearGroupPair

G1, G2 = BilinearGroupPair().groups()

a1, a2, b1, b2 = n_rand(None, 4, G2, as_point=True)
x1, x2, r1, r2 = n_rand(None, 4, G2)
y1 = G2.wsum([x1, x2], [a1, a2])
y2 = G2.wsum([x1, x2], [b1, b2])

protocol = PokProtocol.init(x1, r1, a1, a2, x2, r2, b1, b2)
transcript = io.BytesIO()
protocol.challenge_contribution(a1, a2, b1, b2, y1, y2, transcript)
challenge = compute_random_oracle_challenge(transcript.getvalue(), G2)
data = pack.encode(protocol.gen_proof(challenge))

proof = pack.decode(data)
assert proof.verify(y1, y2, a1, a2, b1, b2, challenge)
