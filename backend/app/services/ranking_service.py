"""
Ranking Service - optional LLM post-processing of heuristic recommendations.

Two calls, both against an OpenAI-compatible chat completion endpoint:
1. Reason enrichment: 3-5 personalised reasons per card
2. Re-rank: a 1-100 relevance score per card, used to reorder the list

Both are best effort. A missing client, a timeout, or an API error leaves
the recommendations exactly as they were.
"""

import asyncio
import logging
from typing import List, Optional

from openai import AsyncOpenAI, APIError, APITimeoutError

from app.config import LLMConfig
from app.services.errors import UpstreamUnavailable
from engine.models import ScoredCard, UserProfile
from engine.recommender import apply_ai_reasons, apply_ai_scores, extract_json_array

logger = logging.getLogger(__name__)


RERANK_SYSTEM_PROMPT = (
    "You are a credit card recommendation expert who carefully analyzes user "
    "profiles to provide personalized card rankings."
)
ENRICH_SYSTEM_PROMPT = (
    "You are a credit card recommendation expert who provides detailed, personalized analysis."
)


def build_async_client() -> Optional[AsyncOpenAI]:
    if not LLMConfig.API_KEY:
        return None
    return AsyncOpenAI(
        api_key=LLMConfig.API_KEY,
        base_url=LLMConfig.BASE_URL,
        timeout=float(LLMConfig.TIMEOUT_SECONDS),
    )


# ============================================================================
# PROMPTS
# ============================================================================

def build_profile_block(profile: UserProfile) -> str:
    benefit = profile.preferred_benefits.value if profile.preferred_benefits else "none"
    return (
        f"Monthly Income: ₹{profile.monthly_income:g}\n"
        f"Spending Categories: {', '.join(profile.spending_habits)}\n"
        f"Preferred Benefits: {benefit}\n"
        f"Credit Score: {profile.credit_score}"
    )


def build_card_block(scored: ScoredCard, include_reasons: bool = False) -> str:
    card = scored.card
    lines = [
        f"Card Name: {card.name}",
        f"Issuer: {card.issuer}",
        f"Annual Fee: ₹{card.annual_fee:g}",
        f"Reward Type: {card.reward_type.value}",
        f"Reward Rate: {card.reward_rate}",
        f"Categories: {', '.join(card.categories)}",
        f"Special Perks: {', '.join(card.special_perks)}",
    ]
    if include_reasons:
        lines.append(f"Reasons: {', '.join(scored.reasons)}")
    return "\n".join(lines)


def build_rerank_prompt(profile: UserProfile, cards: List[ScoredCard]) -> str:
    cards_info = "\n\n".join(build_card_block(card, include_reasons=True) for card in cards)
    return f"""Based on the following user profile:
{build_profile_block(profile)}

And these credit card options:
{cards_info}

Analyze the suitability of each card for this specific user. Rank the cards in order of relevance, where 1 is the most suitable.
For each card, assign a relevance score from 1-100 based on how well it matches the user's profile, spending habits, and preferences.

Format the output as a JSON array of objects, where each object contains the card name and relevance score. Example:
[
  {{"name": "Card Name 1", "score": 95}},
  {{"name": "Card Name 2", "score": 82}}
]"""


def build_enrich_prompt(profile: UserProfile, cards: List[ScoredCard]) -> str:
    cards_info = "\n\n".join(build_card_block(card) for card in cards)
    return f"""Based on the following user profile:
{build_profile_block(profile)}

And these credit card options:
{cards_info}

For each card, generate 3-5 highly personalized reasons why this specific card would be good for this specific user.
Focus on matching the card benefits to the user's spending habits, income level, and preferences.

Format the output as a JSON array of arrays, where each inner array contains the reasons for one card in the same order as provided. Example:
[
  ["Perfect match for dining and travel spending patterns", "Premium airport lounge access suits your travel needs"],
  ["5% cashback on groceries optimizes your regular spending", "Zero annual fee great for your budget preferences"]
]"""


# ============================================================================
# SERVICE
# ============================================================================

class RankingService:
    def __init__(self, client: Optional[AsyncOpenAI] = None, config=LLMConfig):
        self.client = client
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _complete(self, system_prompt: str, user_prompt: str, temperature: float, max_tokens: int) -> str:
        """
        Run one chat completion with a caller-enforced timeout.

        Timeouts and network errors are retried up to MAX_RETRIES attempts;
        API errors and anything unexpected fail immediately.

        Raises:
            UpstreamUnavailable: no client, or the call did not produce content
        """
        if self.client is None:
            raise UpstreamUnavailable("llm", "API key not configured")

        max_retries = self.config.MAX_RETRIES
        for attempt in range(1, max_retries + 1):
            try:
                response = await asyncio.wait_for(
                    self.client.chat.completions.create(
                        model=self.config.MODEL,
                        messages=[
                            {"role": "system", "content": system_prompt},
                            {"role": "user", "content": user_prompt},
                        ],
                        temperature=temperature,
                        max_tokens=max_tokens,
                    ),
                    timeout=float(self.config.TIMEOUT_SECONDS),
                )
                content = response.choices[0].message.content if response.choices else None
                return (content or "").strip()
            except (asyncio.TimeoutError, APITimeoutError) as exc:
                logger.warning(f"LLM timeout (attempt {attempt}/{max_retries})")
                if attempt == max_retries:
                    raise UpstreamUnavailable("llm", "timeout") from exc
            except APIError as exc:
                logger.warning(f"LLM API error (attempt {attempt}/{max_retries}): {exc}")
                raise UpstreamUnavailable("llm", f"API error: {exc}") from exc
            except (ConnectionError, IOError) as exc:
                logger.warning(f"Network error (attempt {attempt}/{max_retries}): {exc}")
                if attempt == max_retries:
                    raise UpstreamUnavailable("llm", f"network error: {exc}") from exc
            except Exception as exc:
                logger.exception(f"Unexpected error during LLM call: {type(exc).__name__}: {exc}")
                raise UpstreamUnavailable("llm", f"unexpected error: {type(exc).__name__}") from exc

        raise UpstreamUnavailable("llm", "max retries exceeded")

    async def enrich_reasons(self, profile: UserProfile, cards: List[ScoredCard]) -> List[ScoredCard]:
        """Replace heuristic reasons with personalised ones; keep them on failure."""
        if not cards or not self.enabled:
            return list(cards)

        try:
            content = await self._complete(
                ENRICH_SYSTEM_PROMPT,
                build_enrich_prompt(profile, cards),
                self.config.ENRICH_TEMPERATURE,
                self.config.ENRICH_MAX_TOKENS,
            )
        except UpstreamUnavailable as exc:
            logger.warning(f"Reason enrichment skipped: {exc}")
            return list(cards)

        return apply_ai_reasons(cards, extract_json_array(content))

    async def rerank(self, profile: UserProfile, cards: List[ScoredCard]) -> List[ScoredCard]:
        """Reorder by model relevance score; keep the heuristic order on failure."""
        if not cards or not self.enabled:
            return list(cards)

        try:
            content = await self._complete(
                RERANK_SYSTEM_PROMPT,
                build_rerank_prompt(profile, cards),
                self.config.RERANK_TEMPERATURE,
                self.config.RERANK_MAX_TOKENS,
            )
        except UpstreamUnavailable as exc:
            logger.warning(f"Re-rank skipped: {exc}")
            return list(cards)

        ranking = extract_json_array(content)
        if ranking is None:
            logger.warning("Re-rank response had no usable JSON array; keeping heuristic order")
            return list(cards)
        return apply_ai_scores(cards, ranking)
