import random

import pytest

from petlib.ec import EcGroup

from zkpok.pairings import BilinearGroupPair


@pytest.fixture
def group():
    return EcGroup()


@pytest.fixture
def group_pair():
    return BilinearGroupPair()


@pytest.fixture(params=["ec", "g1", "g2"])
def any_group(request):
    """Every kind of group the proofs run over."""
    if request.param == "ec":
        return EcGroup()
    G1, G2 = BilinearGroupPair().groups()
    return G1 if request.param == "g1" else G2


@pytest.fixture
def rng():
    return random.Random(0).randbytes
