from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from pydantic import BaseModel

from markethub.schemas.enums import CoinCategory, Exchange


class IdentityCoin(BaseModel):
    """An entry of the identity provider's full coin list."""

    id: str
    symbol: str
    name: str


class AssetInfo(BaseModel):
    """Market snapshot of one coin as reported by the identity provider."""

    id: str
    market_cap_usd: Optional[float] = None
    price_usd: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    is_stablecoin: bool = False


class ResolvedIdentity(BaseModel):
    name: Optional[str] = None
    identity_id: Optional[str] = None
    category: Optional[CoinCategory] = None


@dataclass
class IdentitySnapshot:
    """Everything needed to resolve symbols offline, fetched once per aggregation."""

    coins_by_id: Dict[str, IdentityCoin] = field(default_factory=dict)
    stablecoin_ids: Set[str] = field(default_factory=set)
    symbol_maps: Dict[Exchange, Dict[str, str]] = field(default_factory=dict)
