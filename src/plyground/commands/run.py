"""Command line interface for running serialized query plans on files.

Loads the files into a local store, submits the plan read from a JSON
file (as produced by :meth:`plyground.LazyFrame.to_dict`) and prints
the result in a tabular format using :mod:`plyground.utils.tabulate`.
"""

import argparse
import json
import sys

from plyground import config, connect
from plyground.exceptions import PlygroundError
from plyground.utils import tabulate


def main(argv: list[str] | None = None) -> None:
    """Parse the command line arguments and run the plan."""
    parser = argparse.ArgumentParser(description="Run a query plan on files.")
    parser.add_argument(
        "-t",
        "--table",
        action="append",
        help="Map a table name to a CSV or Parquet file. Can be provided multiple times.",
    )
    parser.add_argument(
        "--max-rows",
        type=int,
        default=config.get_display_max_rows(),
        help="How many rows of the result to print.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log the executed plans."
    )
    parser.add_argument(
        "plan", type=str, help="Path of the JSON plan to run, - for standard input."
    )
    args = parser.parse_args(argv)

    for table in args.table or []:
        if "=" not in table:
            parser.error(f"Invalid table mapping {table!r}, expected name=path")

    if args.verbose:
        config.enable_debug()

    try:
        if args.plan == "-":
            request = json.load(sys.stdin)
        else:
            with open(args.plan) as f:
                request = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Invalid plan, {e}")
        sys.exit(1)

    with connect() as session:
        try:
            for table in args.table or []:
                table_name, file_path = table.split("=", 1)
                if file_path.endswith(".parquet"):
                    session.read_parquet(table_name, file_path)
                else:
                    session.read_csv(table_name, file_path)

            result = session.execute(request)
        except PlygroundError as e:
            print(f"Query failed, {e}")
            sys.exit(1)

    print(tabulate.tabulate(result, max_rows=args.max_rows))


if __name__ == "__main__":
    main()
