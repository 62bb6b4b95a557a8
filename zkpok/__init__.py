__version__ = "0.1.0"
__title__ = "zkpok"
__author__ = "Wouter Lueks, Bogdan Kulynych"
__email__ = "wouter.lueks@epfl.ch"
__license__ = "MIT"
__description__ = "Proofs of knowledge of two discrete logarithms satisfying two relations."
__copyright__ = "2020, Wouter Lueks, Bogdan Kulynych (EPFL SPRING Lab)"


from zkpok.expr import Secret
from zkpok.base import compute_random_oracle_challenge
from zkpok.primitives.pok_equality import PokProtocol, PokProof
from zkpok.utils import make_generators, rand, n_rand
