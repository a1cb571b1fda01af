import logging
import os
import queue
import threading

from tqdm import tqdm

from .errors import OutputError
from .records import parse_record
from .taxonomy import UNKNOWN

logger = logging.getLogger(__name__)


def output_path(prefix, rank, world_size):
    """Per-worker output file; a single worker writes to ``prefix`` itself."""
    if world_size == 1:
        return prefix
    return f"{prefix}.{rank}"


def format_row(query, node, projections):
    return "\t".join([str(query), str(node.taxid), node.label, node.rank,
                      ";".join(projections)]) + "\n"


def process_job(job, taxonomy, store, levels, output, abort=None,
                progress=False):
    """Resolve every record of ``job`` and write one line per record.

    Blank records are skipped. A record without any known taxid is written
    as the UNKNOWN call with an empty projection field. Store read errors
    propagate; the run cannot be complete without that record.
    Returns the number of lines written.
    """
    try:
        f = open(output, "w")
    except OSError as e:
        raise OutputError(f"Could not create output file {output}: "
                          f"{e}") from e

    written = 0
    with f:
        for i in tqdm(range(job.start, job.stop), desc=f"worker {job.rank}",
                      position=job.rank, leave=False, disable=not progress):
            if abort is not None and abort.is_set():
                logger.warning(f"Worker {job.rank} stopping at record {i}: "
                               "run aborted")
                break
            record = parse_record(store.data_at(i), store.key_at(i))
            if record is None:
                continue
            query, taxa = record
            node = taxonomy.lca_or_unknown(taxa)
            if levels and node is not UNKNOWN:
                projections = taxonomy.at_levels(node, levels)
            else:
                projections = []
            f.write(format_row(query, node, projections))
            written += 1
    return written


def run_workers(jobs, taxonomy, store, levels, output, progress=False):
    """Process ``jobs`` concurrently, one thread per job.

    Jobs are queued before any thread starts; each thread blocks on the
    queue for exactly one job. All threads are joined before returning,
    so ``store`` may be closed safely afterwards. The first worker error
    is re-raised once every thread has finished, after removing the
    incomplete output files.
    """
    world_size = len(jobs)
    jobs_queue = queue.Queue(maxsize=world_size)
    abort = threading.Event()
    lock = threading.Lock()
    errors = []
    written = {}

    for job in jobs:
        jobs_queue.put(job)

    def worker():
        job = jobs_queue.get()
        try:
            path = output_path(output, job.rank, world_size)
            logger.info(f"Worker {job.rank}: records {job.start:,} to "
                        f"{job.stop:,} -> {path}")
            n = process_job(job, taxonomy, store, levels, path, abort=abort,
                            progress=progress)
            with lock:
                written[job.rank] = n
        except Exception as e:
            abort.set()
            with lock:
                errors.append(e)

    threads = [threading.Thread(target=worker, name=f"taxlca-worker-{i}")
               for i in range(world_size)]
    started = []
    try:
        for t in threads:
            t.start()
            started.append(t)
    except BaseException:
        abort.set()
        # Workers read the shared store until they return
        for t in started:
            t.join()
        remove_outputs(jobs, output)
        raise
    for t in started:
        t.join()

    if errors:
        remove_outputs(jobs, output)
        logger.error(f"❌ {len(errors)} of {world_size} workers failed; "
                     "removed partial output")
        raise errors[0]

    return sum(written.values())


def remove_outputs(jobs, output):
    for job in jobs:
        path = output_path(output, job.rank, len(jobs))
        if os.path.isfile(path):
            os.remove(path)
