from __future__ import annotations

import argparse
import logging

from marketwatch.api.deps import get_refresh_job
from marketwatch.db import init_db
from marketwatch.settings import get_settings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Refresh market data for one user's portfolio symbols.")
    parser.add_argument("user_id", help="id of the user whose portfolios define the symbols")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    init_db()
    report = get_refresh_job().run(args.user_id)

    print(f"updated {report.updated}/{len(report.symbols)} ({report.source})")
    for outcome in report.outcomes:
        suffix = f" ({outcome.reason})" if outcome.reason else ""
        print(f"  {outcome.symbol}: {outcome.status.value}{suffix}")
    print(report.note)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
