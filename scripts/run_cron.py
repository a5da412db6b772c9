"""
Run a scheduled notification job from the command line.

The scheduler (cron, a CI schedule, a hosting platform's cron) calls this
with the same bearer token the HTTP cron endpoints expect.

Usage:
    python scripts/run_cron.py master --authorization "Bearer $CRON_SECRET"
    CRON_AUTHORIZATION="Bearer ..." python scripts/run_cron.py daily-summary

Requirements:
    - SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, RESEND_API_KEY, CRON_SECRET
      in the environment, .env or .streamlit/secrets.toml
"""

import argparse
import json
import os
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from hacknotify.errors import CronAuthorizationError
from hacknotify.logging import setup_logging
from hacknotify.notifications import JOBS, run_job


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a HackNotify notification job")
    parser.add_argument("job", choices=["master", *JOBS], help="Job to run")
    parser.add_argument(
        "--authorization",
        default=os.getenv("CRON_AUTHORIZATION"),
        help='Authorization header value, "Bearer <CRON_SECRET>" (default: $CRON_AUTHORIZATION)',
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level.upper(), log_to_file=False)

    try:
        result = run_job(args.job, args.authorization)
    except CronAuthorizationError as e:
        print(json.dumps({"error": e.message}), file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0 if result.get("success") else 2


if __name__ == "__main__":
    sys.exit(main())
