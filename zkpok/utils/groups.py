from zkpok.consts import DEFAULT_GROUP
from zkpok.utils.hashing import group_elem_from_try_and_incr


def make_generators(num, group=None, seed=b"zkpok"):
    """
    Derive group generators from a public seed.

    The generators are hashed to the group, so nobody knows discrete logarithms between them.

    .. WARNING ::

        There is a negligible chance that some generators will be the same.

    >>> from petlib.ec import EcPt
    >>> generators = make_generators(3)
    >>> len(generators) == 3
    True
    >>> isinstance(generators[0], EcPt)
    True
    >>> generators == make_generators(3)
    True
    >>> generators[0] != generators[1]
    True

    Args:
        num: Number of generators to generate.
        group: Group
        seed (bytes): Public seed.
    """
    if group is None:
        group = DEFAULT_GROUP
    return [
        group_elem_from_try_and_incr(seed + b"-generator-%i" % i, group)
        for i in range(num)
    ]
