import csv
import logging
import os

import pandas as pd

from .core_lca import positive_int
from .workers import output_path

logger = logging.getLogger(__name__)

COLUMNS = ["Query", "TaxID", "TaxName", "Rank", "Levels"]


def add_arguments(parser):
    parser.description = (
        "Merge the per-worker output of an 'lca' run and count the queries "
        "assigned to each taxon."
    )
    parser.add_argument("--output", default="taxa.tsv",
                        help="Output given to the 'lca' run " \
                        "(default: taxa.tsv)")
    parser.add_argument("--threads", type=positive_int, default=4,
                        help="Number of threads used by the 'lca' run " \
                        "(default: 4)")
    parser.add_argument("--merged", default=None,
                        help="Optional - write all worker outputs, in " \
                        "worker order, to this TSV")
    parser.add_argument("--counts", default=None,
                        help="Per-taxon counts TSV (default: " \
                        "<output>.counts)")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose output")


def read_assignments(path):
    try:
        return pd.read_csv(path, sep="\t", header=None, names=COLUMNS,
                           dtype={"Query": str, "TaxName": str, "Rank": str,
                                  "Levels": str},
                           keep_default_na=False, quoting=csv.QUOTE_NONE)
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=COLUMNS)


def collect_outputs(prefix, world_size):
    """Concatenate the worker outputs of a run in worker order."""
    frames = []
    for rank in range(world_size):
        path = output_path(prefix, rank, world_size)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Worker output not found: {path}")
        frames.append(read_assignments(path))
    assignments = pd.concat(frames, ignore_index=True)
    assignments["TaxID"] = assignments["TaxID"].astype("int64")
    return assignments


def count_taxa(assignments):
    counts = (assignments.groupby(["TaxID", "TaxName", "Rank"])
              .size().reset_index(name="Queries"))
    total = counts["Queries"].sum()
    counts["Proportion"] = counts["Queries"] / total if total else 0.0
    return (counts.sort_values(["Queries", "TaxID"],
                               ascending=[False, True])
            .reset_index(drop=True))


def run(args):
    assignments = collect_outputs(args.output, args.threads)
    logger.info(f"Read {len(assignments):,} assignments from "
                f"{args.threads} worker outputs")

    if args.merged:
        assignments.to_csv(args.merged, sep="\t", header=False, index=False,
                           quoting=csv.QUOTE_NONE)
        logger.info(f"Merged assignments written to {args.merged}")

    counts = count_taxa(assignments)
    counts_path = args.counts or f"{args.output}.counts"
    counts.to_csv(counts_path, sep="\t", index=False)
    logger.info(f"✅ {len(counts):,} taxa counted, written to {counts_path}")
    return counts
