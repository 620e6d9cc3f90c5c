"""Static profiles of the audited protocols behind the project commands."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProjectInfo:
    name: str
    description: str
    audit: str
    features: str
    tvl: str
    reference: str

    def format(self) -> str:
        return (
            f"{self.name}\n\n{self.description}\n\n{self.audit}\n\n"
            f"Features: {self.features}\nTVL: {self.tvl}\n\n{self.reference}"
        )


PROJECTS: dict[str, ProjectInfo] = {
    "uniswap": ProjectInfo(
        name="Uniswap",
        description="Leading decentralized exchange (DEX) protocol",
        audit="Audited by Pashov Audit Group for V4 Periphery contracts",
        features="Automated market making, liquidity pools, token swaps",
        tvl="$3.5B+",
        reference="Trusted by millions of users for secure DeFi trading.",
    ),
    "aave": ProjectInfo(
        name="Aave",
        description="Decentralized lending and borrowing protocol",
        audit="Audited by Pashov Audit Group for v3.2 upgrade and GHO stablecoin",
        features="Lending pools, flash loans, interest earning",
        tvl="$5B+",
        reference="Leading DeFi lending protocol with advanced security.",
    ),
    "layerzero": ProjectInfo(
        name="LayerZero",
        description="Cross-chain messaging infrastructure",
        audit="Six audits by Pashov Audit Group for cross-chain messaging",
        features="Omnichain applications, cross-chain transfers",
        tvl="$1B+",
        reference="Enabling seamless cross-chain communication.",
    ),
    "ethena": ProjectInfo(
        name="Ethena",
        description="Synthetic dollar protocol",
        audit="Long-term partnership with Pashov Audit Group since 2023",
        features="Synthetic USD, yield generation, delta hedging",
        tvl="$2B+",
        reference="Innovative stablecoin design with enhanced security.",
    ),
    "sushi": ProjectInfo(
        name="Sushi",
        description="Decentralized exchange and DeFi ecosystem",
        audit="Audited by Pashov Audit Group for RouteProcessor V6",
        features="DEX, yield farming, lending, staking",
        tvl="$500M+",
        reference="Comprehensive DeFi platform with multi-chain support.",
    ),
}


def get_project(name: str) -> ProjectInfo | None:
    return PROJECTS.get((name or "").strip().lower())
