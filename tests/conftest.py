"""
Shared fixtures: a small taxdump and a writer for record stores.

The taxonomy used by most tests:

    1 (root)
    ├── 2 (Phylumus, phylum)
    │   └── 3 (Specius, species)
    └── 10 (Bacteria, superkingdom)
        └── 11 (Firmicutes, phylum)
            └── 12 (Bacillales, order)
                ├── 13 (Bacillus, genus)
                │   ├── 14 (Bacillus subtilis, species)
                │   └── 15 (Bacillus cereus, species)
                └── 16 (Staphylococcus, genus)
                    └── 17 (Staphylococcus aureus, species)
"""

import gzip

import pytest

from taxlca.tax_parsing import load_taxonomy

NODES = [
    (1, 1, "no rank"),
    (2, 1, "phylum"),
    (3, 2, "species"),
    (10, 1, "superkingdom"),
    (11, 10, "phylum"),
    (12, 11, "order"),
    (13, 12, "genus"),
    (14, 13, "species"),
    (15, 13, "species"),
    (16, 12, "genus"),
    (17, 16, "species"),
]

NAMES = [
    (1, "Root"),
    (2, "Phylumus"),
    (3, "Specius"),
    (10, "Bacteria"),
    (11, "Firmicutes"),
    (12, "Bacillales"),
    (13, "Bacillus"),
    (14, "Bacillus subtilis"),
    (15, "Bacillus cereus"),
    (16, "Staphylococcus"),
    (17, "Staphylococcus aureus"),
]


def nodes_dmp(nodes):
    return "".join(f"{t}\t|\t{p}\t|\t{r}\t|\tXX\t|\t0\t|\n"
                   for t, p, r in nodes)


def names_dmp(names):
    lines = []
    for taxid, name in names:
        lines.append(f"{taxid}\t|\t{name}\t|\t\t|\tscientific name\t|\n")
        lines.append(f"{taxid}\t|\t{name} synonym\t|\t\t|\tsynonym\t|\n")
    return "".join(lines)


def write_store(data_path, records, index_path=None):
    """Write ``(key, payload)`` pairs as an MMseqs2-style data + index."""
    index_path = index_path or f"{data_path}.index"
    offset = 0
    with open(data_path, "wb") as data, open(index_path, "w") as index:
        for key, payload in records:
            raw = payload.encode("utf-8") + b"\0"
            data.write(raw)
            index.write(f"{key}\t{offset}\t{len(raw)}\n")
            offset += len(raw)
    return str(data_path), str(index_path)


@pytest.fixture
def taxdump(tmp_path):
    nodes = tmp_path / "nodes.dmp"
    names = tmp_path / "names.dmp"
    nodes.write_text(nodes_dmp(NODES))
    names.write_text(names_dmp(NAMES))
    return str(nodes), str(names)


@pytest.fixture
def gz_taxdump(tmp_path):
    nodes = tmp_path / "nodes.dmp.gz"
    names = tmp_path / "names.dmp.gz"
    with gzip.open(nodes, "wt") as f:
        f.write(nodes_dmp(NODES))
    with gzip.open(names, "wt") as f:
        f.write(names_dmp(NAMES))
    return str(nodes), str(names)


@pytest.fixture
def taxonomy(taxdump):
    return load_taxonomy(*taxdump)
