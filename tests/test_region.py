"""RegionResolver — suffix → Google News edition."""

import pytest

from market_reaction.core.region import REGION_MAP, US_REGION, resolve_region, symbol_suffix
from market_reaction.models.datatypes import RegionConfig


class TestSymbolSuffix:
    def test_suffix_after_last_dot(self):
        assert symbol_suffix("RELIANCE.NS") == "NS"
        assert symbol_suffix("A.B.TO") == "TO"

    def test_no_dot_is_empty(self):
        assert symbol_suffix("AAPL") == ""


class TestResolveRegion:
    def test_india(self):
        region = resolve_region("RELIANCE.NS")
        assert region == RegionConfig("IN", "en-IN", "IN:en")

    def test_us_default_without_suffix(self):
        assert resolve_region("AAPL") == US_REGION
        assert US_REGION == RegionConfig("US", "en-US", "US:en")

    @pytest.mark.parametrize("suffix", sorted(REGION_MAP))
    def test_every_known_suffix_maps_exactly(self, suffix):
        assert resolve_region(f"SYM.{suffix}") is REGION_MAP[suffix]

    @pytest.mark.parametrize("symbol", ["BRK.B", "SAP.XX", "TRAILING.", "lower.ns"])
    def test_unknown_suffix_falls_back_to_us(self, symbol):
        assert resolve_region(symbol) == US_REGION

    def test_deterministic(self):
        assert resolve_region("HSBA.L") == resolve_region("HSBA.L")
        assert resolve_region("HSBA.L").geo_code == "GB"
