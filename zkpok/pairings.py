"""
Wrappers around ``bplib`` points that ensure additive notation for all points.

The wrapped groups G1 and G2 expose the same interface as ``petlib.ec.EcGroup``, so proofs can
be made over either of them.
"""

from bplib.bp import BpGroup, G1Elem, G2Elem

import petlib.pack as pack
import msgpack


class BilinearGroupPair:
    """
    A bilinear group pair.

    Contains the two origin groups G1 and G2. The underlying ``bplib.bp.BpGroup`` object is also
    embedded.
    """

    def __init__(self, bp_group=None):
        if bp_group is None:
            bp_group = BpGroup()
        self.bpgp = bp_group
        self.G1 = G1Group(self)
        self.G2 = G2Group(self)

    def groups(self):
        """
        Returns the two groups in the following order: G1, G2.
        """
        return self.G1, self.G2


class _BpPoint:
    """Arithmetic shared by the wrapped points."""

    def __init__(self, pt, bp):
        self.pt = pt
        self.bp = bp

    def __eq__(self, other):
        return self.pt == other.pt

    def __add__(self, other):
        return self.__class__(self.pt + other.pt, self.bp)

    def __sub__(self, other):
        return self + (-1 * other)

    def __mul__(self, nb):
        return self.__class__(self.pt * nb, self.bp)

    __rmul__ = __mul__


class G1Point(_BpPoint):
    """
    Wrapper for G1 points.

    Args:
        pt (``bplib.bp.G1Elem``): Point.
        bp (:py:class:`BilinearGroupPair`): Group pair.
    """

    @property
    def group(self):
        return self.bp.G1

    def export(self, form=0):
        return self.pt.export(form) if form else self.pt.export()

    def __repr__(self):
        return "G1Pt(" + self.pt.export().hex() + ")"


class G2Point(_BpPoint):
    """
    Wrapper for G2 points.

    ``bplib`` has a single encoding for G2, so the requested form is ignored.

    Args:
        pt (``bplib.bp.G2Elem``): Point.
        bp (:py:class:`BilinearGroupPair`): Group pair.
    """

    @property
    def group(self):
        return self.bp.G2

    def export(self, form=0):
        return self.pt.export()

    def __repr__(self):
        return "G2Pt(" + self.pt.export().hex() + ")"


class _BpGroup:
    """
    Wrapper for one of the origin groups that behaves like ``petlib.ec.EcGroup``.

    Args:
        bp (:py:class:`BilinearGroupPair`): Group pair.
    """

    point_cls = None
    elem_cls = None

    def __init__(self, bp):
        self.bp = bp
        self.gen = None
        self.inf = None

    def _raw_generator(self):
        raise NotImplementedError

    def generator(self):
        if self.gen is None:
            self.gen = self.point_cls(self._raw_generator(), self.bp)
        return self.gen

    def infinite(self):
        if self.inf is None:
            self.inf = self.point_cls(self.generator().pt.inf(self.bp.bpgp), self.bp)
        return self.inf

    def order(self):
        return self.bp.bpgp.order()

    def point_from_bytes(self, data):
        return self.point_cls(self.elem_cls.from_bytes(data, self.bp.bpgp), self.bp)

    def __eq__(self, other):
        return self.bp.bpgp == other.bp.bpgp and self.__class__ == other.__class__

    def sum(self, points):
        res = self.infinite()
        for p in points:
            res = res + p
        return res

    def wsum(self, weights, generators):
        res = self.infinite()
        for w, g in zip(weights, generators):
            res = res + w * g
        return res


class G1Group(_BpGroup):
    point_cls = G1Point
    elem_cls = G1Elem

    def _raw_generator(self):
        return self.bp.bpgp.gen1()

    def hash_to_point(self, string):
        return G1Point(self.bp.bpgp.hashG1(string), self.bp)


class G2Group(_BpGroup):
    point_cls = G2Point
    elem_cls = G2Elem

    def _raw_generator(self):
        return self.bp.bpgp.gen2()


def pt_enc(obj):
    """Encoder for the wrapped points."""
    nid = obj.bp.bpgp.nid
    data = obj.pt.export()
    packed_data = msgpack.packb((nid, data))
    return packed_data


def pt_dec(bptype, xtype):
    """Decoder for the wrapped points."""

    def dec(data):
        nid, data = msgpack.unpackb(data)
        bp = BilinearGroupPair()
        pt = bptype.from_bytes(data, bp.bpgp)
        return xtype(pt, bp)

    return dec


# Register encoders and decoders for pairing points
pack.register_coders(G1Point, 111, pt_enc, pt_dec(G1Elem, G1Point))
pack.register_coders(G2Point, 112, pt_enc, pt_dec(G2Elem, G2Point))
