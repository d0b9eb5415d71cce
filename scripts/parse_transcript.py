#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Parse a JTAC radio transcript into a formatted CAS report.

Usage:
    python parse_transcript.py transcript.txt                 # Reparse the whole file
    python parse_transcript.py transcript.txt --incremental   # One segment per line
    cat transcript.txt | python parse_transcript.py --category CAS
"""

import os
import argparse
import logging
import sys

project_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from casrep.utils.config import load_settings
from casrep.utils.reports import REPORT_TEMPLATES, ReportStore, resolve_category

logger = logging.getLogger('parse_transcript')


def read_transcript(path):
    """
    Read transcript text from a file, or stdin when path is None or "-".
    """
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def render_report(store, categories):
    """
    Render the requested categories as titled blocks, skipping empty ones.
    """
    blocks = []
    for category in categories:
        content = store.content(category)
        if not content:
            continue
        title = REPORT_TEMPLATES[category]["title"]
        blocks.append(f"== {title} ==\n{content}")
    return "\n\n".join(blocks)


def main(argv=None):
    """
    Main entry point for the script.
    """
    parser = argparse.ArgumentParser(description="Parse a JTAC transcript into a CAS report")
    parser.add_argument("transcript", nargs="?", default=None,
                        help="Transcript file (reads stdin when omitted or '-')")
    parser.add_argument("--incremental", action="store_true",
                        help="Feed each line as a separate segment instead of reparsing the whole text")
    parser.add_argument("--category", action="append", default=None,
                        help="Only print this category (repeatable), e.g. CAS, Nine-Line, \"9 Line\"")
    parser.add_argument("--env-file", type=str, default=None, help="Path to a .env file with CASREP_* settings")

    args = parser.parse_args(argv)

    settings = load_settings(args.env_file)

    # Configure logging
    logging.basicConfig(level=getattr(logging, settings.log_level),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    categories = list(REPORT_TEMPLATES)
    if args.category:
        categories = []
        for requested in args.category:
            category = resolve_category(requested)
            if category is None:
                logger.error(f"Unknown category: {requested}")
                return 2
            categories.append(category)

    try:
        text = read_transcript(args.transcript)
    except FileNotFoundError:
        logger.error(f"Transcript file not found: {args.transcript}")
        return 1

    store = ReportStore(settings)
    if args.incremental:
        for line in text.splitlines():
            store.process(line)
    else:
        store.reparse(text)

    if store.report.is_empty:
        logger.warning("No report data found in transcript")
        return 0

    print(render_report(store, categories))
    return 0


if __name__ == "__main__":
    sys.exit(main())
