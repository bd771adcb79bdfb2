"""
Command-line interface for the Credit Card Advisor engine.
Runs against the embedded static catalog; no database or LLM required.
"""

import argparse
import sys
from typing import List

from engine.cards import static_catalog
from engine.comparison import compare, feature_leaders, placeholder_cards
from engine.eligibility import select_eligible
from engine.intake import WELCOME_MESSAGE, IntakeSession
from engine.models import ScoredCard, UserProfile, parse_benefit_preference
from engine.recommender import STATIC_POLICY, recommend


def run_intake() -> UserProfile:
    """Ask the four intake questions on stdin until the profile is complete."""
    session = IntakeSession()
    print(WELCOME_MESSAGE)
    while not session.is_complete:
        try:
            answer = input("> ")
        except EOFError:
            print("\nIntake cancelled.")
            sys.exit(1)
        print(session.answer(answer))
    return session.profile()


def print_recommendations(profile: UserProfile, ranked: List[ScoredCard], stage: str):
    benefit = profile.preferred_benefits.value if profile.preferred_benefits else "none"
    print(f"\n=== Card Recommendations ===\n")
    print(f"Monthly income: ₹{profile.monthly_income:,.0f}")
    print(f"Credit score: {profile.credit_score}")
    print(f"Spending: {', '.join(profile.spending_habits) or '(none)'}")
    print(f"Preferred benefit: {benefit}")
    if stage != "strict":
        print(f"(No strict matches; showing {stage} fallback results)")
    print()

    if not ranked:
        print("No cards to recommend.")
        return

    for i, card in enumerate(ranked, 1):
        print(f"{i}. {card.name} ({card.card.issuer}) - score {card.score}")
        print(f"   Annual fee: ₹{card.card.annual_fee:,.0f} | Rewards: {card.card.reward_rate}")
        print(f"   Est. yearly rewards: ₹{card.yearly_rewards:,}")
        for reason in card.reasons:
            print(f"   • {reason}")
        print()


def cmd_advise(args):
    """
    Recommend cards for a profile given as flags, or collected interactively.

    Args:
        args: Parsed command-line arguments with fields:
            - income: monthly income (optional)
            - score: credit score (optional)
            - habits: comma-separated spending categories
            - benefit: preferred benefit tag
    """
    if args.income is None or args.score is None:
        profile = run_intake()
    else:
        if args.income <= 0:
            print(f"Error: Income must be greater than 0. Got: {args.income}")
            sys.exit(1)
        if args.score <= 0:
            print(f"Error: Credit score must be greater than 0. Got: {args.score}")
            sys.exit(1)
        habits = tuple(h.strip().lower() for h in (args.habits or "").split(",") if h.strip())
        profile = UserProfile(
            monthly_income=args.income,
            credit_score=args.score,
            spending_habits=habits,
            preferred_benefits=parse_benefit_preference(args.benefit),
        )

    eligible, stage = select_eligible(profile, static_catalog.get_all())
    ranked = recommend(profile, eligible, STATIC_POLICY)
    print_recommendations(profile, ranked, stage)


def cmd_compare(args):
    """
    Compare catalog cards side by side.

    Args:
        args: Parsed command-line arguments with fields:
            - ids: card ids to compare
    """
    if not args.ids:
        print("Error: Provide at least one card id.")
        sys.exit(1)

    cards = static_catalog.get_by_ids(args.ids)
    if not cards:
        print("No catalog cards matched; showing placeholder rows.")
        cards = placeholder_cards(args.ids)

    rows = compare(cards)
    leaders = feature_leaders(rows)

    print(f"\n=== Card Comparison ===\n")
    for row in rows:
        marker = " [TOP PICK]" if row.is_top_pick else ""
        print(f"{row.card.name} ({row.card.issuer}){marker}")
        print(f"  Annual fee: ₹{row.card.annual_fee:,.0f}")
        print(f"  Est. yearly benefit: ₹{row.estimated_yearly_benefit:,}")
        print(f"  Cost/benefit ratio: {row.cost_benefit_ratio}")
        print(f"  Overall score: {row.overall_score}/100")
        breakdown = ", ".join(f"{name}={value}" for name, value in row.category_scores.items())
        print(f"  Breakdown: {breakdown}")
        print()

    names = {row.card.card_id: row.card.name for row in rows}
    print("--- Best per feature ---")
    for feature, card_ids in leaders.items():
        print(f"{feature}: {', '.join(names[card_id] for card_id in card_ids) or '-'}")
    print()


def cmd_cards(args):
    """List the static catalog."""
    for card in static_catalog.get_all():
        print(f"{card.card_id:>3}  {card.name} ({card.issuer}) - {card.reward_type.value}, "
              f"fee ₹{card.annual_fee:,.0f}, min income ₹{card.min_income:,.0f}, "
              f"min score {card.min_credit_score}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Credit Card Advisor CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Advise command
    parser_advise = subparsers.add_parser("advise", help="Get card recommendations")
    parser_advise.add_argument("--income", type=float, default=None, help="Monthly income (omit for interactive intake)")
    parser_advise.add_argument("--score", type=int, default=None, help="Credit score (omit for interactive intake)")
    parser_advise.add_argument("--habits", default="", help="Spending categories, comma separated (e.g. travel,dining)")
    parser_advise.add_argument("--benefit", default=None, help="Preferred benefit (cashback | travel_points | ...)")

    # Compare command
    parser_compare = subparsers.add_parser("compare", help="Compare cards side by side")
    parser_compare.add_argument("ids", type=int, nargs="+", help="Card ids to compare")

    # Cards command
    subparsers.add_parser("cards", help="List the static catalog")

    # Parse arguments
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    if args.command == "advise":
        cmd_advise(args)
    elif args.command == "compare":
        cmd_compare(args)
    elif args.command == "cards":
        cmd_cards(args)


if __name__ == "__main__":
    main()
