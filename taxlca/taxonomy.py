from .errors import NoValidTaxaError, ParseError

UNCLASSIFIED = "unclassified"


class TaxonomyNode:
    """One taxon of the tree.

    ``name`` holds the scientific name from names.dmp (None if the taxon
    has none) and ``depth`` is filled in once the whole tree is loaded.
    """

    __slots__ = ("taxid", "parent", "rank", "name", "depth")

    def __init__(self, taxid, parent, rank, name=None, depth=None):
        self.taxid = taxid
        self.parent = parent
        self.rank = rank
        self.name = name
        self.depth = depth

    @property
    def label(self):
        return self.name if self.name is not None else f"taxid:{self.taxid}"

    def __repr__(self):
        return (f"TaxonomyNode(taxid={self.taxid}, parent={self.parent}, "
                f"rank={self.rank!r}, name={self.name!r})")


# Returned when no LCA can be computed; never stored in a Taxonomy
UNKNOWN = TaxonomyNode(0, 0, "no rank", name="unknown", depth=0)


class Taxonomy:
    """Read-only taxonomy tree with LCA and rank lookups.

    The tree is complete once constructed: every node has a depth, the
    parent chain of every node ends at the single root. Nothing mutates
    it afterwards, so worker threads share one instance without locking.
    """

    def __init__(self, nodes):
        self._nodes = nodes
        self.root = self._find_root()
        self._compute_depths()

    def __len__(self):
        return len(self._nodes)

    def __contains__(self, taxid):
        return taxid in self._nodes

    def __getitem__(self, taxid):
        return self._nodes[taxid]

    def get(self, taxid, default=None):
        return self._nodes.get(taxid, default)

    def _find_root(self):
        roots = [n for n in self._nodes.values() if n.parent == n.taxid]
        if not roots:
            raise ParseError("taxonomy has no root (a node that is its own "
                             "parent)")
        if len(roots) > 1:
            ids = ", ".join(str(n.taxid) for n in roots[:5])
            raise ParseError(f"taxonomy has {len(roots)} roots ({ids})")
        return roots[0]

    def _compute_depths(self):
        self.root.depth = 0
        for node in self._nodes.values():
            if node.depth is not None:
                continue
            # Climb to the first node with a known depth, then unwind
            path = []
            on_path = set()
            current = node
            while current.depth is None:
                if current.taxid in on_path:
                    raise ParseError(f"cycle in parent links at taxid "
                                     f"{current.taxid}")
                path.append(current)
                on_path.add(current.taxid)
                parent = self._nodes.get(current.parent)
                if parent is None:
                    raise ParseError(f"taxid {current.taxid} has unknown "
                                     f"parent {current.parent}")
                current = parent
            depth = current.depth
            for n in reversed(path):
                depth += 1
                n.depth = depth

    # --- LCA ---
    def pairwise_lca(self, a, b):
        nodes = self._nodes
        while a.depth > b.depth:
            a = nodes[a.parent]
        while b.depth > a.depth:
            b = nodes[b.parent]
        while a.taxid != b.taxid:
            a = nodes[a.parent]
            b = nodes[b.parent]
        return a

    def lca(self, taxids):
        """Lowest common ancestor of the known taxids in ``taxids``.

        Unknown taxids are ignored; raises NoValidTaxaError when none is
        left. The result only depends on the set of known taxids.
        """
        result = None
        seen = 0
        for taxid in taxids:
            seen += 1
            node = self._nodes.get(taxid)
            if node is None:
                continue
            if result is None:
                result = node
            else:
                result = self.pairwise_lca(result, node)
        if result is None:
            raise NoValidTaxaError(f"none of {seen} taxids found in "
                                   f"the taxonomy")
        return result

    def lca_or_unknown(self, taxids):
        try:
            return self.lca(taxids)
        except NoValidTaxaError:
            return UNKNOWN

    # --- Rank projection ---
    def lineage(self, taxid):
        """Nodes from ``taxid`` up to and including the root."""
        node = self._nodes[taxid]
        path = [node]
        while node.parent != node.taxid:
            node = self._nodes[node.parent]
            path.append(node)
        return path

    def get_ancestor_at_level(self, node, target_level):
        if node is UNKNOWN:
            return None
        nodes = self._nodes
        current = node
        while True:
            if current.rank == target_level:
                return current
            if current.parent == current.taxid:
                # reached root
                return None
            current = nodes[current.parent]

    def at_levels(self, node, ranks):
        """Label of the ancestor (or self) of ``node`` at each rank.

        Ranks absent from the lineage give "unclassified"; the output has
        the same length and order as ``ranks``.
        """
        out = []
        for rank in ranks:
            ancestor = self.get_ancestor_at_level(node, rank)
            out.append(ancestor.label if ancestor is not None
                       else UNCLASSIFIED)
        return out
