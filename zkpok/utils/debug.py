"""
Utils that can be useful for debugging.
"""

from zkpok.utils.sampling import rand


class SigmaProtocol:
    """
    Interactive run of a proof of knowledge of two discrete logarithms.

    Plays commitment, random challenge, and response in memory, without Fiat-Shamir.

    Args:
        statement: Tuple of public values ``(y1, y2, a1, a2, b1, b2)``.
        prover: :py:class:`zkpok.primitives.pok_equality.PokProtocol` that has not been consumed.
        rng: Randomness source of the verifier.
    """

    def __init__(self, statement, prover, rng=None):
        self.statement = statement
        self.prover = prover
        self.rng = rng

    def verify(self, verbose=True):
        """Run the verification process."""

        # Funky names.
        peggy = self.prover
        y1, y2, a1, a2, b1, b2 = self.statement

        challenge = rand(self.rng, a1.group)
        proof = peggy.gen_proof(challenge)
        result = proof.verify(y1, y2, a1, a2, b1, b2, challenge)

        if verbose:
            if result:
                print("Verified for {0}".format(peggy.__class__.__name__))
            else:
                print("Not verified for {0}".format(peggy.__class__.__name__))

        return result
