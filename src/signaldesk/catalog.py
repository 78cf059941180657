"""Static pillar catalog and reference lists."""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


class PillarId(str, Enum):
    """Topic pillars, plus the newsletter output mode."""

    MARKET_STRUCTURE = "market_structure"
    BITCOIN = "bitcoin"
    ETHEREUM = "ethereum"
    ALTCOINS = "altcoins"
    MEME_COINS = "meme_coins"
    EXCHANGES = "exchanges"
    REGULATION = "regulation"
    SECURITY = "security"
    NEWSLETTER = "newsletter"


class PillarDefinition(BaseModel):
    """A topic pillar: reflection questions and reference material."""

    model_config = ConfigDict(frozen=True)

    id: PillarId
    name: str
    icon: str = ""
    questions: tuple[str, ...] = Field(
        default=(), description="Ordered; answers map to questions by position"
    )
    sources: tuple[str, ...] = ()
    metrics: tuple[str, ...] = ()
    reminder: str = ""

    @property
    def is_content(self) -> bool:
        return self.id is not PillarId.NEWSLETTER


PILLARS: tuple[PillarDefinition, ...] = (
    PillarDefinition(
        id=PillarId.MARKET_STRUCTURE,
        name="Market Structure & Macro",
        icon="📊",
        questions=(
            "What is the market pricing in this week?",
            "Where is capital rotating and why?",
        ),
        sources=("Glassnode", "DeFiLlama", "ZeroHedge", "The Block Research"),
        metrics=("BTC Dominance", "Stablecoin Supply Ratio (SSR)", "Funding Rates"),
        reminder="Focus on macro liquidity trends and institutional flow.",
    ),
    PillarDefinition(
        id=PillarId.BITCOIN,
        name="Bitcoin (BTC) Deep Dive",
        icon="₿",
        questions=(
            "How are ETF flows influencing local price action?",
            "Is on-chain accumulation signaling a cycle shift?",
        ),
        sources=("Bitcoin Magazine", "Checkonchain", "Farside ETF Tracker"),
        metrics=("ETF Net Inflow/Outflow", "Hashrate Growth", "HODL Waves"),
        reminder="Bitcoin is the anchor. Watch the base layer health.",
    ),
    PillarDefinition(
        id=PillarId.ETHEREUM,
        name="Ethereum & Smart Platforms",
        icon="⟠",
        questions=(
            "What is the current L2 vs L1 value capture dynamic?",
            "Is network fee usage indicating new application growth?",
        ),
        sources=("L2Beat", "Ultra Sound Money", "The Daily Gwei"),
        metrics=("L2 TVL Growth", "Burn Rate vs Issuance", "Active Validator Count"),
        reminder="Ethereum is an economy. Analyze throughput and burn.",
    ),
    PillarDefinition(
        id=PillarId.ALTCOINS,
        name="Altcoins (Narrative-Based)",
        icon="🚀",
        questions=(
            "Which sub-sector is currently leading the bounce?",
            "Is there genuine technical innovation or purely speculative hype?",
        ),
        sources=("Messari", "CoinGecko Narrative Tracker", "Dune Analytics"),
        metrics=("Sector Market Cap Change", "Developer Activity", "Social Volume"),
        reminder="Altcoins follow narratives. Identify the theme before the pump.",
    ),
    PillarDefinition(
        id=PillarId.MEME_COINS,
        name="Meme Coins (Psychology)",
        icon="🐕",
        questions=(
            "Why is this meme gaining attention right now?",
            "What behavior is driving liquidity (community vs influencers)?",
        ),
        sources=("DexScreener", "BubbleMaps", "X/Twitter Trends"),
        metrics=("Holder Concentration", "DEX Volume/Liquidity Ratio", "Sentiment Score"),
        reminder="Avoid shilling. Focus on behavior and narrative psychology.",
    ),
    PillarDefinition(
        id=PillarId.EXCHANGES,
        name="Exchanges (CEX & DEX)",
        icon="🏦",
        questions=(
            "Are exchange balances increasing or decreasing significantly?",
            "Which DEX is capturing the most volume from specific narratives?",
        ),
        sources=("Nansen", "Token Terminal", "Exchange Proof of Reserves"),
        metrics=("CEX Inflow/Outflow", "DEX vs CEX Volume Ratio", "OI on Top Pairs"),
        reminder="Exchanges are the pipes. Watch for leaks or surges.",
    ),
    PillarDefinition(
        id=PillarId.REGULATION,
        name="Regulation & Legal",
        icon="⚖️",
        questions=(
            "How do recent legal filings impact US-based operations?",
            "Which jurisdictions are showing the most builder-friendly progress?",
        ),
        sources=("CoinDesk Policy", "Variant Fund Legal", "SEC/CFTC Filings"),
        metrics=("Regulatory Score by Region", "Legal Case Status Tracker"),
        reminder="Compliance is the gatekeeper. Stay ahead of the hammer.",
    ),
    PillarDefinition(
        id=PillarId.SECURITY,
        name="Security, Hacks & Risk",
        icon="🛡️",
        questions=(
            "What was the primary vector for the latest exploit?",
            "Are users migrating to self-custody or safer bridges?",
        ),
        sources=("PeckShield", "CertiK", "Rekt News"),
        metrics=("Total Value Hacked (TVH)", "Audit Coverage Percent"),
        reminder="Risk is the only constant. Protect the capital.",
    ),
    PillarDefinition(
        id=PillarId.NEWSLETTER,
        name="Newsletter Engine",
        icon="✉️",
        reminder="Select your best intelligence signals to synthesize a professional market update.",
    ),
)

SOURCES: tuple[str, ...] = (
    "Glassnode",
    "DeFiLlama",
    "Twitter/X",
    "Manual Insight",
    "Farside",
    "Nansen",
    "Messari",
)

NEWSLETTER_TYPES: tuple[str, ...] = (
    "Market Pulse",
    "Narrative Watch",
    "On-Chain Insight",
    "Meme Psychology",
    "Risk Report",
    "Builder / Investor Journal",
)

NEWSLETTER_TAG = "Newsletter"

OUTPUT_TYPES: tuple[str, ...] = (
    NEWSLETTER_TAG,
    "Blog Post",
    "Journal Archive",
    "Email Campaign",
)

EXAMPLE_HOOKS: tuple[str, ...] = (
    "What most crypto traders missed this week",
    "The metric no influencer is talking about",
    "Why the consensus is likely wrong about [Topic]",
    "Connecting the dots between macro and on-chain",
)


class PillarCatalog:
    """Read-only lookup over pillar definitions."""

    def __init__(self, pillars: Iterable[PillarDefinition] = PILLARS):
        self._pillars = tuple(pillars)
        self._by_id: dict[PillarId, PillarDefinition] = {}

        for pillar in self._pillars:
            if pillar.id in self._by_id:
                raise ValueError(f"Duplicate pillar id: {pillar.id.value}")
            if pillar.is_content and not pillar.questions:
                raise ValueError(f"Pillar {pillar.id.value} has no questions")
            self._by_id[pillar.id] = pillar

        if not self._pillars:
            raise ValueError("Pillar catalog is empty")

    def get(self, pillar_id: PillarId | str) -> Optional[PillarDefinition]:
        """Look up a pillar by id. Returns None for unknown ids."""
        try:
            key = PillarId(pillar_id)
        except ValueError:
            return None
        return self._by_id.get(key)

    def all(self) -> tuple[PillarDefinition, ...]:
        """All pillars in navigation order."""
        return self._pillars

    def content_pillars(self) -> tuple[PillarDefinition, ...]:
        """Pillars that own insights (everything except the newsletter mode)."""
        return tuple(p for p in self._pillars if p.is_content)

    def default(self) -> PillarDefinition:
        """The pillar selected when nothing else is."""
        return self._pillars[0]


def get_catalog() -> PillarCatalog:
    """Get the built-in pillar catalog."""
    return PillarCatalog(PILLARS)
