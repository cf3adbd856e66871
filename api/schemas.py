"""Pydantic schemas for API requests and responses."""

from dataclasses import replace
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from core.rules import DoubleRestriction, HouseRules, SurrenderRule
from core.statistics.house_edge import HouseEdgeResult

BlackjackPays = Literal["3:2", "6:5", "1:1"]

BLACKJACK_PAYOUTS: dict[str, float] = {"3:2": 1.5, "6:5": 1.2, "1:1": 1.0}

# Wire field -> HouseRules field, where the names differ.
_RULE_FIELDS = {
    "decks": "num_decks",
    "hit_soft_17": "dealer_hits_soft_17",
    "surrender_allowed": "surrender",
    "double_restriction": "double_on",
}


class RulesOverrides(BaseModel):
    """Partial house rules; anything left out keeps its default."""

    model_config = ConfigDict(populate_by_name=True)

    decks: int | None = Field(None, ge=1, le=8)
    hit_soft_17: bool | None = Field(None, alias="hitSoft17")
    surrender_allowed: SurrenderRule | None = Field(None, alias="surrenderAllowed")
    double_after_split: bool | None = Field(None, alias="doubleAfterSplit")
    double_restriction: DoubleRestriction | None = Field(None, alias="doubleRestriction")
    no_hole_card: bool | None = Field(None, alias="noHoleCard")
    blackjack_pays: BlackjackPays | None = Field(None, alias="blackjackPays")
    resplit_aces: bool | None = Field(None, alias="resplitAces")
    hit_split_aces: bool | None = Field(None, alias="hitSplitAces")
    max_split_hands: int | None = Field(None, ge=1, le=4, alias="maxSplitHands")

    def apply_to(self, base: HouseRules) -> HouseRules:
        """
        Merge these overrides over a base rule set.

        Raises:
            InvalidRulesError: If the merged rules contradict each other
        """
        changes = {}
        for name, value in self.model_dump(exclude_none=True).items():
            if name == "blackjack_pays":
                changes["blackjack_payout"] = BLACKJACK_PAYOUTS[value]
            else:
                changes[_RULE_FIELDS.get(name, name)] = value
        return replace(base, **changes)


class SimulateRequest(BaseModel):
    """Request to compute the house edge for a rule set."""

    model_config = ConfigDict(populate_by_name=True)

    num_hands: int | None = Field(None, ge=0, alias="numHands")
    rules: RulesOverrides | None = None


class RulesResponse(BaseModel):
    """The fully resolved rules a simulation ran with."""

    model_config = ConfigDict(populate_by_name=True)

    decks: int
    hit_soft_17: bool = Field(alias="hitSoft17")
    surrender_allowed: SurrenderRule = Field(alias="surrenderAllowed")
    double_after_split: bool = Field(alias="doubleAfterSplit")
    double_restriction: DoubleRestriction = Field(alias="doubleRestriction")
    no_hole_card: bool = Field(alias="noHoleCard")
    blackjack_payout: float = Field(alias="blackjackPayout")
    resplit_aces: bool = Field(alias="resplitAces")
    hit_split_aces: bool = Field(alias="hitSplitAces")
    max_split_hands: int = Field(alias="maxSplitHands")

    @classmethod
    def from_rules(cls, rules: HouseRules) -> "RulesResponse":
        return cls(
            decks=rules.num_decks,
            hit_soft_17=rules.dealer_hits_soft_17,
            surrender_allowed=rules.surrender,
            double_after_split=rules.double_after_split,
            double_restriction=rules.double_on,
            no_hole_card=rules.no_hole_card,
            blackjack_payout=rules.blackjack_payout,
            resplit_aces=rules.resplit_aces,
            hit_split_aces=rules.hit_split_aces,
            max_split_hands=rules.max_split_hands,
        )


class SimulationResponse(BaseModel):
    """House-edge result."""

    model_config = ConfigDict(populate_by_name=True)

    house_edge_percent: float = Field(alias="houseEdgePercent")
    expected_return: float = Field(alias="expectedReturn")
    num_hands: int = Field(alias="numHands")
    hands_considered: int = Field(alias="handsConsidered")
    max_split_hands: int = Field(alias="maxSplitHands")
    player_blackjack_probability: float = Field(alias="playerBlackjackProbability")
    dealer_blackjack_probability: float = Field(alias="dealerBlackjackProbability")
    action_frequencies: dict[str, float] = Field(alias="actionFrequencies")
    estimated_house_edge_percent: float = Field(alias="estimatedHouseEdgePercent")
    rules: RulesResponse
    rules_version: str = Field(alias="rulesVersion")

    @classmethod
    def from_result(
        cls,
        result: HouseEdgeResult,
        rules: HouseRules,
        estimate: float,
        rules_version: str,
    ) -> "SimulationResponse":
        return cls(
            house_edge_percent=result.house_edge_percent,
            expected_return=result.expected_return,
            num_hands=result.num_hands,
            hands_considered=result.hands_considered,
            max_split_hands=result.max_split_hands,
            player_blackjack_probability=result.player_blackjack_probability,
            dealer_blackjack_probability=result.dealer_blackjack_probability,
            action_frequencies=result.action_frequencies,
            estimated_house_edge_percent=estimate,
            rules=RulesResponse.from_rules(rules),
            rules_version=rules_version,
        )


class ErrorResponse(BaseModel):
    """Generic failure body."""

    error: str
