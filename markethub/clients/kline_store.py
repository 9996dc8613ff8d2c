"""Price history store: interface and HTTP client for the kline service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from markethub.core.config import settings
from markethub.core.http import HttpJsonClient
from markethub.schemas.klines import KlineCreationRequest, PairKlineResponse


class BaseKlineStore(ABC):
    @abstractmethod
    async def replace_kline_data(self, requests: Sequence[KlineCreationRequest]) -> List[PairKlineResponse]:
        """Replace stored candles of every trading pair present in ``requests``."""


class KlineStoreClient(BaseKlineStore, HttpJsonClient):
    source = "kline service"

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        HttpJsonClient.__init__(self, base_url or settings.KLINE_SERVICE_URL, **kwargs)

    async def replace_kline_data(self, requests: Sequence[KlineCreationRequest]) -> List[PairKlineResponse]:
        payload = [req.model_dump(mode="json") for req in requests]
        data = await self.request_json("PUT", "/kline", json=payload)
        return [PairKlineResponse.model_validate(item) for item in data or []]
