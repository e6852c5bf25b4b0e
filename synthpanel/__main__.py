"""synthpanel CLI — entry point for running synthetic investor panels.

Usage:
    python -m synthpanel run-test PRODUCT_JSON --founder-id ID   Run a panel on a product
    python -m synthpanel list-tests [--founder-id ID]             List stored tests
    python -m synthpanel show-test TEST_ID                        Print one stored test
    python -m synthpanel match-score PRODUCT_JSON --thesis TEXT   Score a thesis/product match
    python -m synthpanel market-analysis --name N --description D --price-point P --founder-id ID
                                                                  Research a product's market
    python -m synthpanel due-diligence PRODUCT_JSON --investor-id ID Write a due diligence brief
    python -m synthpanel summarize PRODUCT_JSON                    Fill in a product's AI summary
    python -m synthpanel reputation --reviews N ...               Compute a reputation score
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path
from uuid import UUID

import structlog
from pydantic import ValidationError

from synthpanel.analysis.reputation import activity_from_reviews, compute_reputation
from synthpanel.config.settings import SynthPanelSettings, get_settings
from synthpanel.exceptions import SynthPanelError
from synthpanel.factory import (
    build_insight_service,
    build_market_analysis_service,
    build_runner,
    build_store,
)
from synthpanel.schemas.enums import SubscriptionTier, UserType
from synthpanel.schemas.insights import ActivityCounts
from synthpanel.schemas.market import FounderProfile, MarketAnalysisRequest
from synthpanel.schemas.product import Product
from synthpanel.schemas.results import Requester, SyntheticTestRequest
from synthpanel.utils.logging import configure_logging

logger = structlog.get_logger()


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="synthpanel",
        description="Synthetic investor panels for startup products",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for persistent storage (default: SYNTHPANEL_DATA_DIR or data)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: SYNTHPANEL_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # run-test
    run_test = subparsers.add_parser("run-test", help="Run a synthetic panel on a product")
    run_test.add_argument("product", type=Path, help="Path to a product JSON file")
    run_test.add_argument("--founder-id", required=True, help="ID of the requesting founder")
    run_test.add_argument(
        "--tier",
        choices=[t.value for t in SubscriptionTier],
        default=SubscriptionTier.FOUNDER.value,
        help="Requester subscription tier (default: founder)",
    )
    run_test.add_argument(
        "--persona-count",
        type=int,
        default=None,
        help="Number of personas (default: SYNTHPANEL_DEFAULT_PERSONA_COUNT or 100)",
    )
    run_test.add_argument("--payment-intent-id", default=None)

    # list-tests
    list_tests = subparsers.add_parser("list-tests", help="List stored synthetic tests")
    list_tests.add_argument("--founder-id", default=None)
    list_tests.add_argument("--product-id", default=None)
    list_tests.add_argument("--limit", type=int, default=20)

    # show-test
    show_test = subparsers.add_parser("show-test", help="Print one stored synthetic test")
    show_test.add_argument("test_id", type=UUID)

    # match-score
    match_score = subparsers.add_parser(
        "match-score", help="Score how well an investor thesis fits a product"
    )
    match_score.add_argument("product", type=Path, help="Path to a product JSON file")
    match_score.add_argument("--thesis", required=True, help="Investor thesis text")

    # market-analysis
    market = subparsers.add_parser("market-analysis", help="Research the market for a product idea")
    market.add_argument("--name", required=True, help="Product name")
    market.add_argument("--description", required=True, help="Product description (100+ characters)")
    market.add_argument("--price-point", required=True, help="Price point, e.g. '$49/month'")
    market.add_argument("--product-id", default=None)
    market.add_argument("--founder-id", required=True, help="ID of the requesting founder")
    market.add_argument(
        "--tier",
        choices=[t.value for t in SubscriptionTier],
        default=SubscriptionTier.FOUNDER.value,
    )

    # due-diligence
    diligence = subparsers.add_parser("due-diligence", help="Write a due diligence brief")
    diligence.add_argument("product", type=Path, help="Path to a product JSON file")
    diligence.add_argument("--investor-id", required=True, help="ID of the requesting investor")
    diligence.add_argument(
        "--tier",
        choices=[t.value for t in SubscriptionTier],
        default=SubscriptionTier.INVESTOR.value,
    )
    diligence.add_argument(
        "--founder-profile",
        type=Path,
        default=None,
        help="Path to a founder profile JSON file",
    )

    # summarize
    summarize = subparsers.add_parser("summarize", help="Fill in a product's AI summary")
    summarize.add_argument("product", type=Path, help="Path to a product JSON file")
    summarize.add_argument("--transcription", type=Path, default=None, help="Video transcription text file")

    # reputation
    reputation = subparsers.add_parser("reputation", help="Compute a reputation score")
    reputation.add_argument("--reviews", type=int, default=0)
    reputation.add_argument("--detailed-reviews", type=int, default=0)
    reputation.add_argument("--interactions", type=int, default=0)
    reputation.add_argument("--messages", type=int, default=0)
    reputation.add_argument("--super-likes", type=int, default=0)
    reputation.add_argument("--account-age-days", type=int, default=0)
    reputation.add_argument(
        "--reviews-file",
        type=Path,
        default=None,
        help="JSON array of review texts; overrides --reviews and --detailed-reviews",
    )

    return parser.parse_args(argv)


def _load_settings(args: argparse.Namespace) -> SynthPanelSettings:
    settings = get_settings()
    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = replace(settings, **overrides)
    return settings


def _load_product(path: Path) -> Product:
    try:
        return Product.model_validate_json(path.read_text())
    except OSError as e:
        raise SynthPanelError(f"Cannot read product file {path}: {e}") from e
    except ValidationError as e:
        raise SynthPanelError(f"Invalid product file {path}: {e.error_count()} error(s)") from e


def _load_review_texts(path: Path) -> list[str | None]:
    try:
        texts = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise SynthPanelError(f"Cannot read reviews file {path}: {e}") from e
    if not isinstance(texts, list) or any(
        t is not None and not isinstance(t, str) for t in texts
    ):
        raise SynthPanelError(f"Reviews file {path} must hold a JSON array of strings")
    return texts


async def _cmd_run_test(args: argparse.Namespace, settings: SynthPanelSettings) -> int:
    """Run one synthetic panel and print its summary."""
    product = _load_product(args.product)
    request = SyntheticTestRequest(
        product=product,
        persona_count=args.persona_count or settings.default_persona_count,
        payment_intent_id=args.payment_intent_id,
    )
    requester = Requester(
        id=args.founder_id,
        user_type=UserType.FOUNDER,
        tier=SubscriptionTier(args.tier),
    )

    runner = build_runner(settings)
    record = await runner.run(request, requester)
    results = record.results

    print(f"\nSynthetic test {record.test_id}")
    print(f"Product: {product.title} ({record.persona_count} personas)")
    print("-" * 50)
    print(f"Like rate:       {results.like_rate:5.1f}%")
    print(f"Pass rate:       {results.pass_rate:5.1f}%")
    print(f"Super like rate: {results.super_like_rate:5.1f}%")
    sentiment = results.sentiment_analysis
    print(
        f"Sentiment:       {sentiment.positive:.1f} positive / "
        f"{sentiment.neutral:.1f} neutral / {sentiment.negative:.1f} negative"
    )
    if results.top_concerns:
        print("\nTop concerns:")
        for i, concern in enumerate(results.top_concerns, start=1):
            print(f"  {i}. {concern}")
    print("\nRecommendations:")
    for recommendation in results.recommendations:
        print(f"  - {recommendation}")
    print(f"\nProcessed in {record.processing_time_seconds}s")
    return 0


def _cmd_list_tests(args: argparse.Namespace, settings: SynthPanelSettings) -> int:
    """List stored tests, newest first."""
    store = build_store(settings)
    records = store.query(
        founder_id=args.founder_id,
        product_id=args.product_id,
        limit=args.limit,
    )

    print(f"\n{'Test ID':<38} {'Product':<20} {'Date':<20} {'Personas':>8} {'Like %':>7}")
    print("-" * 97)
    for record in records:
        print(
            f"{str(record.test_id):<38} {record.product_id:<20} "
            f"{record.test_date:%Y-%m-%d %H:%M:%S}  "
            f"{record.persona_count:>8} {record.results.like_rate:>7.1f}"
        )
    print(f"\n{len(records)} of {store.count()} tests")
    return 0


def _cmd_show_test(args: argparse.Namespace, settings: SynthPanelSettings) -> int:
    """Print one stored test as JSON."""
    store = build_store(settings)
    record = store.get(args.test_id)
    if record is None:
        print(f"Test not found: {args.test_id}", file=sys.stderr)
        return 1
    print(record.model_dump_json(indent=2))
    return 0


async def _cmd_match_score(args: argparse.Namespace, settings: SynthPanelSettings) -> int:
    """Score a thesis against a product."""
    product = _load_product(args.product)
    service = build_insight_service(settings)
    insight = await service.score_match(args.thesis, product)
    print(insight.model_dump_json(indent=2))
    return 0


async def _cmd_market_analysis(args: argparse.Namespace, settings: SynthPanelSettings) -> int:
    """Run a market analysis and print it as JSON."""
    request = MarketAnalysisRequest(
        product_name=args.name,
        description=args.description,
        price_point=args.price_point,
        product_id=args.product_id,
    )
    requester = Requester(
        id=args.founder_id,
        user_type=UserType.FOUNDER,
        tier=SubscriptionTier(args.tier),
    )
    service = build_market_analysis_service(settings)
    result = await service.analyze_market(request, requester)
    print(result.model_dump_json(indent=2))
    return 0


async def _cmd_due_diligence(args: argparse.Namespace, settings: SynthPanelSettings) -> int:
    """Print a due diligence brief for a product."""
    product = _load_product(args.product)
    founder = FounderProfile()
    if args.founder_profile is not None:
        try:
            founder = FounderProfile.model_validate_json(args.founder_profile.read_text())
        except (OSError, ValidationError) as e:
            raise SynthPanelError(f"Invalid founder profile {args.founder_profile}: {e}") from e
    requester = Requester(
        id=args.investor_id,
        user_type=UserType.INVESTOR,
        tier=SubscriptionTier(args.tier),
    )
    service = build_market_analysis_service(settings)
    print(await service.generate_due_diligence_brief(product, founder, requester))
    return 0


async def _cmd_summarize(args: argparse.Namespace, settings: SynthPanelSettings) -> int:
    """Print the product JSON with ai_generated_summary filled in."""
    product = _load_product(args.product)
    transcription = None
    if args.transcription is not None:
        try:
            transcription = args.transcription.read_text()
        except OSError as e:
            raise SynthPanelError(f"Cannot read transcription {args.transcription}: {e}") from e
    service = build_market_analysis_service(settings)
    summarized = await service.summarize_product(product, transcription=transcription)
    print(summarized.model_dump_json(indent=2))
    return 0


def _cmd_reputation(args: argparse.Namespace) -> int:
    """Compute and print a reputation score."""
    counts = {
        "interaction_count": args.interactions,
        "message_count": args.messages,
        "super_like_count": args.super_likes,
        "account_age_days": args.account_age_days,
    }
    if args.reviews_file is not None:
        activity = activity_from_reviews(_load_review_texts(args.reviews_file), **counts)
    else:
        activity = ActivityCounts(
            review_count=args.reviews,
            detailed_review_count=args.detailed_reviews,
            **counts,
        )
    reputation = compute_reputation(activity)
    print(f"\nScore: {reputation.score:.1f}  Rank: {reputation.rank.value} ({reputation.rank_label})")
    for factor, points in reputation.breakdown.model_dump().items():
        print(f"  {factor:<18} {points:5.1f}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = _load_settings(args)
    configure_logging(json_output=settings.json_logs, level=settings.log_level)

    try:
        if args.command == "reputation":
            return _cmd_reputation(args)
        elif args.command == "list-tests":
            return _cmd_list_tests(args, settings)
        elif args.command == "show-test":
            return _cmd_show_test(args, settings)
        elif args.command == "run-test":
            return asyncio.run(_cmd_run_test(args, settings))
        elif args.command == "match-score":
            return asyncio.run(_cmd_match_score(args, settings))
        elif args.command == "market-analysis":
            return asyncio.run(_cmd_market_analysis(args, settings))
        elif args.command == "due-diligence":
            return asyncio.run(_cmd_due_diligence(args, settings))
        elif args.command == "summarize":
            return asyncio.run(_cmd_summarize(args, settings))
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1
    except SynthPanelError as e:
        logger.error("Command failed", command=args.command, error_type=type(e).__name__, error=str(e))
        print(f"synthpanel: {args.command} failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
