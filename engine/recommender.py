"""
Recommendation ranking rules.
Turns scored candidates into the final top-N list and folds in the
(optional) re-rank and reason data returned by an external model.
"""

import json
import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional

from engine.models import CardRecord, ScoredCard, UserProfile
from engine.scoring import CONSERVATIVE, SIMPLE, SpendPreset, score_card

logger = logging.getLogger(__name__)


DEFAULT_AI_SCORE = 50
GENERIC_REASONS = (
    "Great match for your spending habits",
    "Excellent rewards structure",
    "Good value for annual fee",
)

_JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


@dataclass(frozen=True)
class RecommendationPolicy:
    """
    How one call path turns candidates into recommendations.

    Fields:
    - preset: spend assumption for yearly rewards
    - top_n: number of cards returned
    - require_positive_score: drop cards scoring 0 before the cut
    """
    preset: SpendPreset
    top_n: int
    require_positive_score: bool = True


# Store-backed path
STORE_POLICY = RecommendationPolicy(preset=CONSERVATIVE, top_n=5, require_positive_score=True)
# Static catalog path
STATIC_POLICY = RecommendationPolicy(preset=SIMPLE, top_n=3, require_positive_score=False)


def rank_candidates(scored: Iterable[ScoredCard], policy: RecommendationPolicy) -> List[ScoredCard]:
    """
    Filter, sort (descending score, stable on ties) and cut to top_n.
    """
    candidates = list(scored)
    if policy.require_positive_score:
        candidates = [card for card in candidates if card.score > 0]
    candidates.sort(key=lambda card: card.score, reverse=True)
    return candidates[: max(policy.top_n, 0)]


def recommend(
    profile: UserProfile,
    eligible_cards: Iterable[CardRecord],
    policy: RecommendationPolicy = STORE_POLICY,
) -> List[ScoredCard]:
    """
    Score every eligible card and return the ranked top-N.

    Args:
        profile: completed UserProfile
        eligible_cards: output of the eligibility stage
        policy: spend preset, cut size and score filter for this call path

    Returns:
        Ranked list of fresh ScoredCard objects
    """
    scored = [score_card(card, profile, policy.preset) for card in eligible_cards]
    return rank_candidates(scored, policy)


def extract_json_array(content: Optional[str]) -> Optional[Any]:
    """
    Pull the outermost [...] block out of free text and decode it.

    Returns None when there is no array or it does not parse.
    """
    if not content:
        return None
    match = _JSON_ARRAY_PATTERN.search(content)
    if not match:
        return None
    try:
        decoded = json.loads(match.group(0))
    except ValueError:
        logger.warning("Model response contained an array that is not valid JSON")
        return None
    return decoded if isinstance(decoded, list) else None


def _coerce_score(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return None


def apply_ai_scores(cards: List[ScoredCard], ranking: Any) -> List[ScoredCard]:
    """
    Attach ai_score by exact card-name match and re-sort by it.

    Cards missing from the ranking get DEFAULT_AI_SCORE. A ranking that is
    not a list leaves the input order untouched.
    """
    if not isinstance(ranking, list):
        return list(cards)

    score_by_name = {}
    for item in ranking:
        if not isinstance(item, dict) or "name" not in item:
            continue
        score = _coerce_score(item.get("score"))
        if score is not None:
            score_by_name[str(item["name"])] = score

    rescored = [
        replace(card, ai_score=score_by_name.get(card.name) or DEFAULT_AI_SCORE)
        for card in cards
    ]
    rescored.sort(key=lambda card: card.ai_score, reverse=True)
    return rescored


def apply_ai_reasons(cards: List[ScoredCard], reasons: Any) -> List[ScoredCard]:
    """
    Replace reasons with the per-card lists returned by the model.

    The lists are aligned by position. An unusable response or a missing
    entry falls back to GENERIC_REASONS for the affected cards.
    """
    if not isinstance(reasons, list):
        reasons = []

    enriched = []
    for index, card in enumerate(cards):
        entry = reasons[index] if index < len(reasons) else None
        if isinstance(entry, list) and entry:
            new_reasons = tuple(str(reason) for reason in entry)
        else:
            new_reasons = GENERIC_REASONS
        enriched.append(replace(card, reasons=new_reasons))
    return enriched
