from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import DeclarativeBase
from wraffle.db.metadata import metadata_obj

# BigInteger keys, with a SQLite-safe Integer variant so autoincrement works.
ID_TYPE = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    metadata = metadata_obj
