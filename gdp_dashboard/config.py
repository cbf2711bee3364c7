# gdp_dashboard/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).parent.resolve()
PROJECT_DIR = PACKAGE_DIR.parent

# -------------------------
# Source documents
# -------------------------
# Empty base URL -> documents are read from SOURCE_DIR on disk
SOURCE_BASE_URL = os.getenv("SOURCE_BASE_URL", "").rstrip("/")
SOURCE_DIR = Path(os.getenv("SOURCE_DIR", str(PROJECT_DIR / "data")))
SOURCE_PATH_TEMPLATE = os.getenv("SOURCE_PATH_TEMPLATE", "countries/{country_id}.html")
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "10"))

# name of the JS variable holding the embedded literal
DATA_VARIABLE = os.getenv("DATA_VARIABLE", "gdpData")

DEFAULT_COUNTRY_IDS = [
    "china", "usa", "india", "germany", "japan",
    "uk", "france", "italy", "brazil", "canada",
]

COUNTRY_IDS = [
    c.strip().lower()
    for c in os.getenv("COUNTRY_IDS", ",".join(DEFAULT_COUNTRY_IDS)).split(",")
    if c.strip()
]

# -------------------------
# Dashboard constants
# -------------------------
YEAR_MIN = int(os.getenv("YEAR_MIN", "2022"))
YEAR_MAX = int(os.getenv("YEAR_MAX", "2025"))
SUPPORTED_YEARS = tuple(range(YEAR_MIN, YEAR_MAX + 1))

# chart cutoff (older dashboard pages used 5)
TOP_N = int(os.getenv("TOP_N", "10"))

TEMPLATES_DIR = PACKAGE_DIR / "templates"

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]

# -------------------------
# Logging
# -------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "")
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    """Set up root logging once for the service and the CLI."""
    kwargs = {"level": getattr(logging, LOG_LEVEL, logging.INFO), "format": LOG_FORMAT}
    if LOG_FILE:
        kwargs["filename"] = LOG_FILE
    logging.basicConfig(**kwargs)
