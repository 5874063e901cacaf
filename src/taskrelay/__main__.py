"""Entry point: ``taskrelay daemon`` runs the Slack bot, anything else is a CLI command."""

from __future__ import annotations

import sys
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from taskrelay.interfaces.cli import main as cli_main


def main(argv: Optional[list[str]] = None) -> int:
    args = argv if argv is not None else sys.argv[1:]

    if args and args[0] == "daemon":
        # Slack and APScheduler are only imported for the long-running process
        from taskrelay.core.daemon import main as daemon_main
        return daemon_main()

    return cli_main(args)


if __name__ == "__main__":  # pragma: no cover - manual execution
    sys.exit(main())
