from zkpok.utils.misc import ensure_bn
from zkpok.utils.hashing import (
    field_elem_from_try_and_incr,
    group_elem_from_try_and_incr,
)
from zkpok.utils.sampling import rand, n_rand, RandomSequence
from zkpok.utils.groups import make_generators
