from petlib.bn import Bn


def ensure_bn(x):
    """
    Ensure that value is big number.

    >>> isinstance(ensure_bn(42), Bn)
    True
    >>> isinstance(ensure_bn(Bn(42)), Bn)
    True
    >>> ensure_bn(2 ** 200) == Bn(2).pow(200)
    True
    >>> ensure_bn(-3)
    -3
    """
    if isinstance(x, Bn):
        return x
    if isinstance(x, int):
        return Bn.from_decimal(str(x))
    raise TypeError("Expected a big number or an int, got {!r}".format(x))
