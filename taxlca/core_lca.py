import argparse
import logging
import time

from .config import LcaConfig
from .domain import decompose
from .record_store import RecordStore
from .tax_parsing import load_taxonomy
from .workers import run_workers

logger = logging.getLogger(__name__)


def positive_int(value):
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return n


def add_arguments(parser):
    parser.add_argument("--nodes", default="nodes.dmp",
                        help="nodes.dmp taxonomy file (can be .gz) "
                        "(default: nodes.dmp)")
    parser.add_argument("--names", default="names.dmp",
                        help="names.dmp taxonomy file (can be .gz) "
                        "(default: names.dmp)")
    parser.add_argument("--db", default="taxons_db",
                        help="Record store data file holding the taxids of " \
                        "each query (default: taxons_db)")
    parser.add_argument("--db_index", default=None,
                        help="Record store index file (default: <db>.index)")
    parser.add_argument("--output", default="taxa.tsv",
                        help="Output TSV. With more than one thread, each " \
                        "worker writes <output>.<worker> (default: taxa.tsv)")
    parser.add_argument("--threads", type=positive_int, default=4,
                        help="Number of worker threads (default: 4)")
    parser.add_argument("--levels", default="",
                        help="Colon-separated taxonomic ranks to report for " \
                        "each LCA, e.g. 'phylum:family:genus' (optional)")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable verbose output")


def run_lca(config):
    """Resolve every record of the store and write the per-worker TSVs.

    Returns the number of output lines written.
    """
    start_time = time.time()

    logger.info("🔄 Loading taxonomy data...")
    taxonomy = load_taxonomy(config.nodes, config.names)
    logger.info(f"✅ Taxonomy loaded: {len(taxonomy):,} taxa")

    with RecordStore(config.db, config.db_index) as store:
        jobs = decompose(store.size(), config.threads)
        written = run_workers(jobs, taxonomy, store, config.levels,
                              config.output, progress=config.verbose)

    logger.info(f"✅ Done: {written:,} queries assigned in "
                f"{time.time() - start_time:.3f}s")
    return written


def run(args):
    return run_lca(LcaConfig.from_args(args))
