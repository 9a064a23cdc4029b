import re

from sqlalchemy import Column, Float, Index, Integer, String, func, literal_column

from ..config.catalog_config import CATALOG_SEARCH_CONFIG, CATALOG_TABLE
from .database import Base

_SEARCH_CONFIG_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")


def search_config_literal(search_config: str = CATALOG_SEARCH_CONFIG):
    """
    Text-search configuration rendered inline as `'<name>'::regconfig`.
    Index matching needs the exact expression, so it is never a bind parameter.
    """
    if not _SEARCH_CONFIG_NAME.match(search_config):
        raise ValueError(f"Invalid text search configuration: {search_config!r}")
    return literal_column(f"'{search_config}'::regconfig")


def name_search_vector(column, search_config: str = CATALOG_SEARCH_CONFIG):
    """tsvector expression shared by the GIN index and full-text lookups."""
    return func.to_tsvector(search_config_literal(search_config), column)


class StockListing(Base):
    """
    One tradable instrument in the stock catalog.
    Populated by the offline ingestion job; read-only for the resolution pipeline.
    """

    __tablename__ = CATALOG_TABLE

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Float, nullable=True)
    exchange = Column(String, nullable=True)
    exchange_short_name = Column(String, nullable=True)
    type = Column(String, nullable=False)
    country = Column(String, nullable=False, index=True)  # 'US', 'HK', 'CN', 'GLOBAL'

    __table_args__ = (
        Index(
            "idx_stock_list_name_tsv",
            name_search_vector(name),
            postgresql_using="gin",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "price": self.price,
            "exchange": self.exchange,
            "exchange_short_name": self.exchange_short_name,
            "type": self.type,
            "country": self.country,
        }
