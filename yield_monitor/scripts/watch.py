"""
Yield Monitor CLI.

Usage:
    yield-monitor protocols
    yield-monitor watch --protocol aave_v3 --chain base --pool USDC
    yield-monitor watch --ticks 10 --interval 60 --apy-threshold 2.5
"""

import argparse
import json
import logging
import sys
import time

from ..config.settings import LOG_LEVEL
from ..core.models import InputValidationError
from ..core.registry import ProtocolRegistry
from ..core.watcher import WatchRequest, Watcher

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yield-monitor",
        description="Watch DeFi lending pool yields and alert on large changes",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("protocols", help="List protocols read on-chain")

    watch = subparsers.add_parser("watch", help="Run monitoring ticks")
    watch.add_argument("--protocol", dest="protocol_ids", action="append", default=[],
                       help="Protocol id to watch (repeatable, e.g. aave_v3)")
    watch.add_argument("--pool", dest="pools", action="append", default=[],
                       help="Reserve symbol or token address filter (repeatable)")
    watch.add_argument("--chain", dest="chains", action="append",
                       help="Chain to read on-chain sources from (repeatable)")
    watch.add_argument("--apy-threshold", type=float,
                       help="APY change alert threshold in percent")
    watch.add_argument("--tvl-threshold", type=float,
                       help="TVL change alert threshold in percent")
    watch.add_argument("--ticks", type=int, default=1,
                       help="Number of ticks to run (default 1)")
    watch.add_argument("--interval", type=float, default=60.0,
                       help="Seconds between ticks (default 60)")

    return parser


def request_from_args(args: argparse.Namespace) -> WatchRequest:
    rules = {
        "apy_change_threshold": args.apy_threshold,
        "tvl_change_threshold": args.tvl_threshold,
    }
    payload = {
        "protocol_ids": args.protocol_ids,
        "pools": args.pools,
        "chains": args.chains,
    }
    if any(v is not None for v in rules.values()):
        payload["threshold_rules"] = rules
    return WatchRequest.from_dict(payload)


def run_watch(args: argparse.Namespace) -> int:
    if args.ticks < 1:
        raise InputValidationError("--ticks must be at least 1")
    if args.interval < 0:
        raise InputValidationError("--interval must not be negative")
    request = request_from_args(args)
    watcher = Watcher()

    for tick in range(args.ticks):
        if tick > 0:
            time.sleep(args.interval)
        output = watcher.watch(request)
        print(json.dumps(output, indent=2))

    print(json.dumps(watcher.health(), indent=2))
    return 0


def main(argv=None) -> int:
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )
    args = build_parser().parse_args(argv)

    try:
        if args.command == "protocols":
            print(json.dumps(ProtocolRegistry().list_protocols(), indent=2))
            return 0
        return run_watch(args)
    except InputValidationError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
