"""
Sampling of uniformly random scalars and group elements.

A randomness source is any callable that takes a number ``n`` and returns ``n`` random bytes,
for instance ``secrets.token_bytes`` (the default) or ``os.urandom``. Seeded generators such as
``random.Random(seed).randbytes`` are only suitable for tests.
"""

import logging
import secrets

from petlib.bn import Bn

from zkpok.consts import DEFAULT_GROUP, MAX_SAMPLING_ATTEMPTS
from zkpok.encoding import order_size
from zkpok.exceptions import SamplingError

logger = logging.getLogger(__name__)


def _random_scalar(rng, order, max_attempts):
    """Rejection sampling of an integer in ``[0, order)``."""
    num_bytes = order_size(order)
    mask = (1 << order.num_bits()) - 1
    bound = int(order)
    for _ in range(max_attempts):
        buf = rng(num_bytes)
        if len(buf) != num_bytes:
            raise SamplingError(
                "Randomness source returned {} bytes, expected {}".format(
                    len(buf), num_bytes
                )
            )
        value = int.from_bytes(buf, "big") & mask
        if value < bound:
            return Bn.from_binary(value.to_bytes(num_bytes, "big"))
    logger.error("Rejection sampling failed after %d attempts", max_attempts)
    raise SamplingError(
        "Could not sample a scalar in {} attempts. Is the randomness source broken?".format(
            max_attempts
        )
    )


def rand(rng=None, group=None, as_point=False, max_attempts=MAX_SAMPLING_ATTEMPTS):
    """
    Sample a random scalar, or a random group element.

    >>> import random
    >>> from petlib.ec import EcGroup, EcPt
    >>> group = EcGroup()
    >>> x = rand(random.Random(1).randbytes, group)
    >>> x == rand(random.Random(1).randbytes, group)
    True
    >>> 0 <= x < group.order()
    True
    >>> isinstance(rand(group=group, as_point=True), EcPt)
    True

    Args:
        rng: Randomness source. Defaults to ``secrets.token_bytes``.
        group: Group to sample from.
        as_point (bool): Return ``x * G`` for the group generator ``G`` instead of ``x``.
        max_attempts: Rejection sampling attempts before :py:class:`SamplingError`.
    """
    if rng is None:
        rng = secrets.token_bytes
    if group is None:
        group = DEFAULT_GROUP
    x = _random_scalar(rng, group.order(), max_attempts)
    if as_point:
        return x * group.generator()
    return x


class RandomSequence:
    """
    A finite, lazy sequence of independently sampled values.

    Values are drawn from the randomness source only when requested. The sequence can be
    consumed from the front (iteration, ``next()``) and from the back (``reversed()``,
    :py:meth:`next_back`); both ends share the same budget of ``count`` values, so each of them
    is produced exactly once. The sequence cannot be restarted.

    >>> seq = RandomSequence(lambda: 1, 3)
    >>> len(seq)
    3
    >>> next(seq)
    1
    >>> seq.next_back()
    1
    >>> list(reversed(seq))
    [1]
    >>> len(seq)
    0

    Args:
        sample: Callable without arguments that draws one value.
        count (int): Number of values.
    """

    def __init__(self, sample, count):
        if count < 0:
            raise ValueError("Count must be non-negative, got {}".format(count))
        self._sample = sample
        self._remaining = count

    def __iter__(self):
        return self

    def __next__(self):
        if self._remaining <= 0:
            raise StopIteration
        self._remaining -= 1
        return self._sample()

    def next_back(self):
        """Draw the last remaining value."""
        # All values are i.i.d., so only the budget distinguishes the two ends.
        return self.__next__()

    def __reversed__(self):
        while self._remaining > 0:
            yield self.next_back()

    def __len__(self):
        return self._remaining


def n_rand(rng, count, group=None, as_point=False, max_attempts=MAX_SAMPLING_ATTEMPTS):
    """
    Lazily sample ``count`` random scalars, or group elements.

    >>> from petlib.ec import EcGroup
    >>> xs = list(n_rand(None, 3, EcGroup()))
    >>> len(xs)
    3

    Args:
        rng: Randomness source. Defaults to ``secrets.token_bytes``.
        count (int): Number of values.
        group: Group to sample from.
        as_point (bool): Sample group elements instead of scalars.
        max_attempts: Rejection sampling attempts per value.

    Returns:
        :py:class:`RandomSequence`
    """
    return RandomSequence(
        lambda: rand(rng, group, as_point=as_point, max_attempts=max_attempts), count
    )
