from .base import Base

# import models so metadata.create_all can discover mappers
from .raffle import (  # noqa: F401
    RaffleEntryRecord,
    RaffleItemRecord,
    RaffleResultRecord,
)

__all__ = [
    "Base",
    "RaffleEntryRecord",
    "RaffleItemRecord",
    "RaffleResultRecord",
]
