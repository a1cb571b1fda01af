import gzip
import logging

from .errors import ParseError
from .taxonomy import Taxonomy, TaxonomyNode

logger = logging.getLogger(__name__)

SCIENTIFIC_NAME = "scientific name"


def smart_open(filepath):
    filepath = str(filepath)
    return gzip.open(filepath,
                     'rt') if filepath.endswith('.gz') else open(filepath, 'r')


def _split_dmp(line):
    line = line.rstrip()
    fields = [x.strip() for x in line.split("|")]
    # Trailing "\t|" terminator leaves an empty last field
    if line.endswith("|"):
        fields.pop()
    return fields


def _to_int(value, what, path, lineno):
    try:
        return int(value)
    except ValueError:
        raise ParseError(f"{what} {value!r} is not an integer",
                         path, lineno) from None


# --- Step 1: Parse taxonomy files ---
def parse_nodes_dmp(path):
    """Yield (taxid, parent_id, rank) for every line of a nodes.dmp file."""
    with smart_open(path) as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            fields = _split_dmp(line)
            if len(fields) < 3:
                raise ParseError(f"expected at least 3 fields, found "
                                 f"{len(fields)}", path, lineno)
            taxid = _to_int(fields[0], "taxid", path, lineno)
            parent_id = _to_int(fields[1], "parent taxid", path, lineno)
            yield taxid, parent_id, fields[2]


def parse_names_dmp(path):
    """Yield (taxid, name) for the scientific names of a names.dmp file."""
    with smart_open(path) as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            fields = _split_dmp(line)
            if len(fields) < 4:
                raise ParseError(f"expected at least 4 fields, found "
                                 f"{len(fields)}", path, lineno)
            if fields[3] == SCIENTIFIC_NAME:
                taxid = _to_int(fields[0], "taxid", path, lineno)
                yield taxid, fields[1]


def load_taxonomy(nodes_fp, names_fp):
    """Build the read-only Taxonomy from a nodes.dmp and names.dmp pair.

    Raises ParseError for malformed lines or an inconsistent tree and
    OSError when a file cannot be opened; nothing partial is returned.
    """
    nodes = {}
    for taxid, parent_id, rank in parse_nodes_dmp(nodes_fp):
        nodes[taxid] = TaxonomyNode(taxid, parent_id, rank)
    logger.info(f"Parsed {len(nodes):,} nodes from {nodes_fp}")

    named = 0
    for taxid, name in parse_names_dmp(names_fp):
        node = nodes.get(taxid)
        if node is None:
            continue
        node.name = name
        named += 1
    logger.info(f"Parsed {named:,} scientific names from {names_fp}")

    try:
        return Taxonomy(nodes)
    except ParseError as e:
        raise ParseError(str(e), nodes_fp) from None
