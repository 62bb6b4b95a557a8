"""
Interactive run of the proof of knowledge of two discrete logarithms, with the challenge drawn
by the verifier instead of hashed. Uses the relations

    y1 = 5 * G + 7 * (2G) = 19G
    y2 = 5 * (3G) + 7 * G = 22G
"""

from petlib.ec import EcGroup

from zkpok import PokProtocol
from zkpok.utils.debug import SigmaProtocol

group = EcGroup()
g = group.generator()

a1, a2, b1, b2 = g, 2 * g, 3 * g, g
y1, y2 = 19 * g, 22 * g

prover = PokProtocol.init(5, 11, a1, a2, 7, 13, b1, b2)
protocol = SigmaProtocol((y1, y2, a1, a2, b1, b2), prover)
assert protocol.verify()
