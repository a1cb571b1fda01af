def parse_taxid(field):
    """Taxon id of a record field, or None if it is not a plain integer."""
    field = field.strip()
    if not field.isascii() or not field.isdigit():
        return None
    return int(field)


def parse_record(data, key=None):
    """Split a raw record into its query key and candidate taxids.

    Each non-blank line is either ``query<TAB>taxid[<TAB>...]`` or a bare
    ``taxid``. A non-empty embedded query overrides ``key``. Fields that
    are not integers become None, which the LCA resolver drops like any
    unknown taxid. Returns None for a record without a single non-blank
    line.
    """
    query = key
    taxa = []
    for line in data.split("\n"):
        if not line.strip().strip("\0"):
            continue
        # Keep tabs so an empty query column stays in place
        values = line.strip("\r\n\0 ").split("\t")
        if len(values) > 1:
            if values[0]:
                query = values[0]
            taxa.append(parse_taxid(values[1]))
        else:
            taxa.append(parse_taxid(values[0]))
    if not taxa:
        return None
    return query, taxa
