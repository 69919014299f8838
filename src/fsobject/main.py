from __future__ import annotations

"""
Main Entry Point.

Routes execution to the CLI controller and converts its return value into
the process exit status.
"""

import sys

from fsobject.interface.cli.app import main as cli_main


def main() -> None:
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
