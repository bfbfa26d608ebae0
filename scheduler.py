from __future__ import annotations

import argparse
import time

from controller import build_controller, run_cycle_and_report


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument(
        "--interval-seconds",
        type=int,
        default=None,
        help="Seconds between cycles (defaults to schedule.interval_seconds from the config)",
    )
    parser.add_argument("--no-notify", action="store_true")
    args = parser.parse_args()

    controller, app_config, logger = build_controller(args.config, notify=not args.no_notify)
    interval = args.interval_seconds or app_config.schedule.interval_seconds
    logger.info("Scheduler started; running every %s seconds", interval)

    # First cycle runs at start-up, then on every tick.
    while True:
        try:
            run_cycle_and_report(controller, app_config, logger)
        except Exception as e:
            logger.exception("Cycle failed: %s: %s", type(e).__name__, e)
        time.sleep(interval)


if __name__ == "__main__":
    raise SystemExit(main())
