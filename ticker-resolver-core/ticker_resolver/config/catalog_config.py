import os

# Catalog storage
CATALOG_TABLE = os.getenv("CATALOG_TABLE", "stock-list")
CATALOG_SEARCH_CONFIG = os.getenv("CATALOG_SEARCH_CONFIG", "english")
CATALOG_RESULT_LIMIT = int(os.getenv("CATALOG_RESULT_LIMIT", "100"))

# Offline ingestion (market data provider)
FMP_BASE_URL = os.getenv("FMP_BASE_URL", "https://financialmodelingprep.com")
FMP_API_KEY = os.getenv("FMP_API_KEY")
FMP_TIMEOUT = float(os.getenv("FMP_TIMEOUT", "60"))
INGESTION_CACHE_DIR = os.getenv("INGESTION_CACHE_DIR", "data/cache")
INGESTION_BATCH_SIZE = int(os.getenv("INGESTION_BATCH_SIZE", "1000"))
