"""Items that are excluded from replacement pricing instead of being priced."""

from dataclasses import dataclass

from pricefinder.registries.brands import LUXURY_BRANDS

_ELECTRONICS = (
    r"\b(?:iphone|ipad|macbook|galaxy|pixel|phone|smartphone|cell ?phone|laptop|tablet|tv|"
    r"television|playstation|ps5|xbox|nintendo|switch|console|smart ?watch|apple watch|computer)\b"
)
_PHONES = r"\b(?:iphone|galaxy|pixel|phone|smartphone|cell ?phone|moto|motorola|android)\b"


@dataclass(frozen=True)
class ExclusionRule:
    name: str
    signal: str  # regex that must match
    context: str  # regex that must also match
    reason: str


EXCLUSION_RULES: tuple[ExclusionRule, ...] = (
    ExclusionRule(
        name="financed_electronics",
        signal=(
            r"\$\s*\d+(?:\.\d{1,2})?\s*(?:/|per|a|an)\s*(?:mo|mos|month|wk|week)\b"
            r"|\b(?:payment plan|monthly payments?|financ(?:ed|ing)|installments?"
            r"|lease[- ]to[- ]own|rent[- ]to[- ]own|device payment)\b"
        ),
        context=_ELECTRONICS,
        reason="Financed or payment-plan electronics are excluded from replacement pricing",
    ),
    ExclusionRule(
        name="carrier_locked_phone",
        signal=(
            r"\b(?:prepaid|pre-paid|carrier[- ]locked|locked to|tracfone|straight talk"
            r"|boost mobile|cricket wireless|metro ?pcs|total wireless|simple mobile)\b"
        ),
        context=_PHONES,
        reason="Carrier-locked and prepaid phones are excluded from replacement pricing",
    ),
    ExclusionRule(
        name="preowned_luxury",
        signal=r"\b(?:pre[- ]?owned|pre[- ]?loved|used|second[- ]?hand|consign(?:ed|ment)|vintage)\b",
        context=r"\b(?:" + "|".join(LUXURY_BRANDS) + r"|designer|luxury)\b",
        reason="Pre-owned luxury and designer items are excluded from replacement pricing",
    ),
)
