from typing import NamedTuple, Tuple

from .record_store import default_index_path


class LcaConfig(NamedTuple):
    """Settings of one ``taxlca lca`` run, fixed once parsed."""

    nodes: str = "nodes.dmp"
    names: str = "names.dmp"
    db: str = "taxons_db"
    db_index: str = "taxons_db.index"
    output: str = "taxa.tsv"
    threads: int = 4
    levels: Tuple[str, ...] = ()
    verbose: bool = False

    @classmethod
    def from_args(cls, args):
        return cls(
            nodes=args.nodes,
            names=args.names,
            db=args.db,
            db_index=args.db_index or default_index_path(args.db),
            output=args.output,
            threads=args.threads,
            levels=parse_levels(args.levels),
            verbose=args.verbose,
        )


def parse_levels(levels):
    """Split a colon-separated rank list, dropping empty entries."""
    if not levels:
        return ()
    return tuple(lev.strip() for lev in levels.split(":") if lev.strip())
