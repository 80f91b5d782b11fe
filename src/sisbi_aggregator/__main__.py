"""CLI エントリーポイント"""

import argparse
import sys
import logging
import os
from pathlib import Path

from .adapters.sisbi_client import SisbiClient
from .domain.listing_query import ListingQuery, filter_establishments, paginate
from .domain.statistics import (
    StateSortOrder,
    summarize_status,
    compute_state_statistics,
    compute_state_totals,
)
from .infrastructure.output_writer import OutputWriter
from .orchestration.aggregation_service import AggregationService, FailurePolicy


def positive_int(value: str) -> int:
    """1 以上の整数のみ受け付ける argparse 用の型"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数パーサーを構築"""
    parser = argparse.ArgumentParser(
        prog="sisbi_aggregator",
        description="SISBI establishment capacity aggregator",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    listing = subparsers.add_parser("listing", help="Establishments merged with capacities")
    listing.add_argument("--search", default="", help="Filter by name, CNPJ, state or municipality")
    listing.add_argument("--bovine-only", action="store_true", help="Only establishments with bovine capacity")
    listing.add_argument("--page", type=positive_int, default=None, help="Page number (1-based)")
    listing.add_argument("--page-size", type=positive_int, default=20, help="Records per page (default: 20)")
    listing.add_argument("--output", type=Path, default=None, help="Write JSON to this file")

    detail = subparsers.add_parser("detail", help="Slaughter throughput of one establishment")
    detail.add_argument("establishment_id", help="Establishment id (idEstabSisbi)")
    detail.add_argument("--output", type=Path, default=None, help="Write JSON to this file")

    stats = subparsers.add_parser("stats", help="Status summary and per-state statistics")
    stats.add_argument(
        "--sort",
        choices=[order.value for order in StateSortOrder],
        default=StateSortOrder.TOTAL.value,
        help="State ordering (default: total)",
    )
    stats.add_argument("--search", default="", help="Filter states by code")
    stats.add_argument("--bovine-only", action="store_true", help="Only states with bovine establishments")
    stats.add_argument("--output", type=Path, default=None, help="Write JSON to this file")

    return parser


def build_service() -> AggregationService:
    """
    環境変数から設定を読み込み AggregationService を構築

    Environment:
        SISBI_API_BASE_URL: API ベース URL
        SISBI_TIMEOUT: タイムアウト秒数
        SISBI_ESTABLISHMENTS_POLICY: 事業所取得失敗時のポリシー (fatal / degrade-to-empty)
        SISBI_CAPACITIES_POLICY: 能力取得失敗時のポリシー (fatal / degrade-to-empty)
    """
    timeout = os.environ.get("SISBI_TIMEOUT", "")
    client = SisbiClient(
        base_url=os.environ.get("SISBI_API_BASE_URL") or None,
        timeout=float(timeout) if timeout else None,
    )
    return AggregationService(
        client=client,
        establishments_policy=FailurePolicy(
            os.environ.get("SISBI_ESTABLISHMENTS_POLICY", FailurePolicy.FATAL.value)
        ),
        capacities_policy=FailurePolicy(
            os.environ.get("SISBI_CAPACITIES_POLICY", FailurePolicy.DEGRADE.value)
        ),
    )


def main(argv=None):
    """
    CLI エントリーポイント

    Usage:
        python -m sisbi_aggregator listing [--search TEXT] [--bovine-only] [--page N]
        python -m sisbi_aggregator detail ID
        python -m sisbi_aggregator stats [--sort total|alphabetical|bovine]

    Exit codes:
        0: 成功
        1: 失敗
    """
    # ロギング設定（標準出力は JSON 用のため stderr に出力）
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr
    )
    logger = logging.getLogger(__name__)

    args = build_parser().parse_args(argv)

    try:
        service = build_service()
        output_writer = OutputWriter()

        if args.command == "detail":
            result = service.run_detail(args.establishment_id)
            output_writer.write_output(result.model_dump(mode="json"), args.output)
            sys.exit(0)

        listing = service.run_listing()
        if not listing.success:
            logger.error(f"Listing failed: {listing.error}")
            output_writer.write_output(listing.to_payload(), args.output)
            sys.exit(1)

        if args.command == "stats":
            states = compute_state_statistics(
                listing.establishments,
                sort_by=StateSortOrder(args.sort),
                search_term=args.search,
                bovine_only=args.bovine_only,
            )
            # 牛フィルタ無効時の総計は検索に関係なく全州が対象
            totals = compute_state_totals(
                states if args.bovine_only else compute_state_statistics(listing.establishments),
                bovine_only=args.bovine_only,
            )
            payload = {
                "summary": summarize_status(listing.establishments).model_dump(mode="json"),
                "states": [state.model_dump(mode="json") for state in states],
                "totals": totals.model_dump(mode="json"),
            }
        else:
            query = ListingQuery(
                search_term=args.search,
                bovine_only=args.bovine_only,
                page=args.page or 1,
                page_size=args.page_size,
            )
            if args.page is not None:
                payload = paginate(listing.establishments, query).model_dump(mode="json")
            else:
                payload = [
                    record.model_dump(mode="json")
                    for record in filter_establishments(listing.establishments, query)
                ]

        output_writer.write_output(payload, args.output)
        logger.info(
            f"{args.command} completed: "
            f"{len(listing.establishments)} establishments aggregated"
        )
        sys.exit(0)

    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
