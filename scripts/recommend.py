#!/usr/bin/env python3
"""Print pick recommendations or warm the stats cache from the command line.

Reads settings (RIOT_API_KEY, STATS_SOURCE, ...) from the environment or .env.

Usage:
    # Recommendations for mid with Zed on the enemy team and Leona on ours
    uv run python scripts/recommend.py --role mid --enemy 238 --ally 89

    # Ban some champions, show the top 10 with full breakdown
    uv run python scripts/recommend.py --role jungle --ban 64 --ban 121 --top 10 --verbose

    # Warm the cache for popular champions in every role
    uv run python scripts/recommend.py --warmup
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend" / "src"))

from pick_assistant.config import settings
from pick_assistant.errors import DataUnavailableError, InputError
from pick_assistant.models.draft import DraftState, PickedEntity
from pick_assistant.services.draft_service import DraftService
from pick_assistant.utils.role_normalizer import normalize_role_strict


# ANSI colors for terminal output
class Colors:
    HEADER = '\033[95m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RESET = '\033[0m'


def print_recommendations(response, verbose: bool = False):
    print(f"\n{Colors.HEADER}Recommendations (patch {response.patch}){Colors.RESET}")
    if not response.recommendations:
        print(f"  {Colors.YELLOW}No champion has enough data for this role yet{Colors.RESET}")
        return

    for i, rec in enumerate(response.recommendations, 1):
        stats = rec.stats
        print(
            f"  {i:>2}. {Colors.BOLD}{rec.entity_name:<14}{Colors.RESET} "
            f"{rec.total_score:5.1f}  {stats.win_rate * 100:.1f}% WR  "
            f"tier {stats.tier.value}  n={stats.sample_size}"
        )
        if verbose:
            b = rec.breakdown
            print(
                f"      {Colors.DIM}win_rate={b.win_rate_score:.1f} popularity={b.popularity_score:.1f} "
                f"counter={b.counter_score:.1f} synergy={b.synergy_score:.1f}{Colors.RESET}"
            )
        for reason in rec.reasoning:
            print(f"      - {reason}")


async def run(args) -> int:
    service = DraftService(settings)
    await service.start()
    try:
        if args.warmup:
            result = await service.warmup_cache()
            print(
                f"{Colors.GREEN}Warmed {result['warmed']}/{result['requested']} "
                f"({result['failed']} failed){Colors.RESET}"
            )
            return 0

        state = DraftState(
            own_picks=[PickedEntity(cid) for cid in args.ally],
            opponent_picks=[PickedEntity(cid) for cid in args.enemy],
            banned_entity_ids=set(args.ban),
            my_role=normalize_role_strict(args.role),
        )
        response = await service.get_recommendations(state, top_n=args.top)
        print_recommendations(response, verbose=args.verbose)
        return 0
    except InputError as e:
        print(f"{Colors.RED}Invalid input: {e}{Colors.RESET}")
        return 2
    except DataUnavailableError as e:
        print(f"{Colors.RED}Data unavailable: {e}{Colors.RESET}")
        return 1
    finally:
        await service.close()


def main():
    parser = argparse.ArgumentParser(
        description="Champion select recommendations from sampled ranked data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("--role", "-r", help="Your role (top, jungle, mid, bot, support)")
    parser.add_argument("--ally", "-a", type=int, action="append", default=[],
                        help="Champion id already picked by your team (repeatable)")
    parser.add_argument("--enemy", "-e", type=int, action="append", default=[],
                        help="Champion id picked by the enemy team (repeatable)")
    parser.add_argument("--ban", "-b", type=int, action="append", default=[],
                        help="Banned champion id (repeatable)")
    parser.add_argument("--top", "-n", type=int, default=settings.default_top_n,
                        help=f"Number of recommendations (default: {settings.default_top_n})")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show full scoring component breakdown")
    parser.add_argument("--warmup", "-w", action="store_true",
                        help="Warm the stats cache for popular champions and exit")

    args = parser.parse_args()
    if not args.warmup and not args.role:
        parser.error("--role is required unless --warmup is given")

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
