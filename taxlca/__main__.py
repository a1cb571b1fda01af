# MIT License
#
# Copyright (c) 2025 Nicolas Locatelli
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

import argparse
import logging
import sys

from . import core_lca
from . import summarize
from .errors import TaxLcaError

logger = logging.getLogger("taxlca")


def setup_logging(verbose):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(threadName)s: %(message)s",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Lowest common ancestor assignment of multi-hit "
        "taxonomic search results"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # LCA subcommand
    lca_parser = subparsers.add_parser("lca", help="Run LCA assignment")
    core_lca.add_arguments(lca_parser)

    # Summarize subcommand
    summarize_parser = subparsers.add_parser(
        "summarize", help="Merge worker outputs and count taxa")
    summarize.add_arguments(summarize_parser)

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "lca":
            core_lca.run(args)
        elif args.command == "summarize":
            summarize.run(args)
    except (TaxLcaError, OSError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
