from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Document semantic search (embeddings + Qdrant)")
    sub = ap.add_subparsers(dest="cmd", required=False)

    # Manage collection
    ec = sub.add_parser("ensure-collection")
    ec.add_argument("--name", required=False, help="Collection name; defaults to $DOCVEC_COLLECTION")
    ec.add_argument("--dim", type=int, default=None, help="Vector size; probed from the embedding model when omitted")
    ec.add_argument("--recreate", action="store_true")

    # Ingest already-extracted text
    ig = sub.add_parser("ingest")
    ig.add_argument("--id", required=True, help="Document identifier (unique per collection)")
    src = ig.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", help="Document text")
    src.add_argument("--file", help="Path to a UTF-8 text file")

    # Ingest PDFs (a file or every *.pdf in a directory)
    ip = sub.add_parser("ingest-pdf")
    ip.add_argument("--path", required=True)
    ip.add_argument("--keep", action="store_true", help="Do not delete the PDF after ingestion")

    qp = add_query_subparser(sub, "query")
    qp.add_argument("--no-answer", action="store_true", help="Skip answer generation")

    sp = add_query_subparser(sub, "search")
    sp.add_argument("--k", type=int, default=5)

    return ap


def add_query_subparser(sub, name):
    """
    Adds a query-style subparser (query or search) sharing the --q argument.

    Args:
        sub: The subparsers object from argparse.
        name: The name of the subcommand to add.

    Returns:
        argparse.ArgumentParser: The configured subparser.
    """
    result = sub.add_parser(name)
    result.add_argument("--q", required=True, help="Query text")
    return result
