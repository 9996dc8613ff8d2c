from enum import Enum


class Exchange(str, Enum):
    BINANCE = "Binance"
    BYBIT = "Bybit"
    MEXC = "Mexc"


class TradingPairStatus(str, Enum):
    AVAILABLE = "Available"
    CURRENTLY_UNAVAILABLE = "CurrentlyUnavailable"
    UNAVAILABLE = "Unavailable"


class CoinCategory(str, Enum):
    STABLECOIN = "Stablecoin"
    FIAT = "Fiat"


class KlineInterval(str, Enum):
    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    FOUR_HOURS = "4h"
    ONE_DAY = "1d"
    ONE_WEEK = "1w"
    ONE_MONTH = "1M"

    @property
    def minutes(self) -> int:
        return _INTERVAL_MINUTES[self]


_INTERVAL_MINUTES = {
    KlineInterval.ONE_MINUTE: 1,
    KlineInterval.FIVE_MINUTES: 5,
    KlineInterval.FIFTEEN_MINUTES: 15,
    KlineInterval.THIRTY_MINUTES: 30,
    KlineInterval.ONE_HOUR: 60,
    KlineInterval.FOUR_HOURS: 240,
    KlineInterval.ONE_DAY: 1440,
    KlineInterval.ONE_WEEK: 10080,
    KlineInterval.ONE_MONTH: 43200,
}
