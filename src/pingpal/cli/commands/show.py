"""``pingpal show``: display a previously exported scan."""
from __future__ import annotations

import argparse

from pingpal.config import Config
from pingpal.scan.models import PingSample
from pingpal.scan.records import load_record
from pingpal.scan.results import summarize

from ..console import console, results_table, summary_tables

HELP = "Display the results stored in an exported JSON file"


def add_arguments(parser: argparse.ArgumentParser, config: Config) -> None:
    parser.add_argument("file", help="Path to a JSON file written with --export")


def run(args: argparse.Namespace, config: Config) -> int:
    record = load_record(args.file)
    console.print(results_table(record.config, record.verdicts))
    samples = [v for v in record.verdicts if isinstance(v, PingSample)]
    if samples:
        for table in summary_tables(summarize(samples)):
            console.print(table)
    return 0
