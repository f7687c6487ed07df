"""
Data generators for trade events
"""
import json
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class TradeRecord:
    """A single synthetic trade event"""
    symbol: str
    price: int
    side: str
    quantity: int
    account: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def serialize(self) -> bytes:
        """Compact JSON encoding used on the wire"""
        return json.dumps(self.to_dict(), separators=(',', ':')).encode('utf-8')


class DataGenerator(ABC):
    """Abstract base class for data generators"""

    @abstractmethod
    def generate_single(self) -> TradeRecord:
        """Generate a single record"""
        pass

    def generate_batch(self, batch_size: int) -> List[TradeRecord]:
        """Generate a batch of records"""
        return [self.generate_single() for _ in range(batch_size)]

    def fill_batch(self, batch: List[TradeRecord], batch_size: int) -> None:
        """Append batch_size fresh records to an existing batch"""
        batch.extend(self.generate_single() for _ in range(batch_size))


class TradeRecordGenerator(DataGenerator):
    """Generate fake stock trade records"""

    # Pre-define choices for performance
    SIDES = ['BUY', 'SELL']
    SYMBOLS = ['ZBZX', 'ZJZZT', 'ZTEST', 'ZVV', 'ZVZZT', 'ZWZZT', 'ZXZZT']
    ACCOUNTS = ['ABC123', 'LMN456', 'XYZ789']

    MIN_PRICE, MAX_PRICE = 5, 1004
    MIN_QUANTITY, MAX_QUANTITY = 1, 5000

    def __init__(self, rng: Optional[random.Random] = None):
        # Pass a seeded Random for reproducible batches
        self.rng = rng if rng is not None else random.Random()

    def generate_single(self) -> TradeRecord:
        """Generate a single trade record"""
        rng = self.rng
        return TradeRecord(
            symbol=rng.choice(self.SYMBOLS),
            price=rng.randint(self.MIN_PRICE, self.MAX_PRICE),
            side=rng.choice(self.SIDES),
            quantity=rng.randint(self.MIN_QUANTITY, self.MAX_QUANTITY),
            account=rng.choice(self.ACCOUNTS),
        )
