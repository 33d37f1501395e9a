"""Exchange-suffix → Google News edition mapping."""

from typing import Dict

from market_reaction.models.datatypes import RegionConfig

US_REGION = RegionConfig(geo_code="US", language_hint="en-US", country_language="US:en")

# Yahoo-style exchange suffixes. gl = geolocation, hl = UI language,
# ceid = country:language edition.
REGION_MAP: Dict[str, RegionConfig] = {
    "NS": RegionConfig("IN", "en-IN", "IN:en"),  # NSE India
    "BO": RegionConfig("IN", "en-IN", "IN:en"),  # BSE India
    "L": RegionConfig("GB", "en-GB", "GB:en"),   # London
    "TO": RegionConfig("CA", "en-CA", "CA:en"),  # Toronto
    "DE": RegionConfig("DE", "en-DE", "DE:en"),  # Frankfurt (Xetra)
    "HK": RegionConfig("HK", "en-HK", "HK:en"),  # Hong Kong
}


def symbol_suffix(symbol: str) -> str:
    """Return the text after the last '.' of ``symbol``, or "" when there is none.

    Examples:
        ``"RELIANCE.NS"`` → ``"NS"``
        ``"BRK.B"`` → ``"B"``
        ``"AAPL"`` → ``""``
    """
    if "." not in symbol:
        return ""
    return symbol.rsplit(".", 1)[1]


def resolve_region(symbol: str) -> RegionConfig:
    """Return the news edition for ``symbol``; unknown or missing suffixes map to US."""
    return REGION_MAP.get(symbol_suffix(symbol), US_REGION)
