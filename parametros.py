"""Parametros globales del proyecto."""

from __future__ import annotations

import logging
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
OUTPUT_DIR = DATA_DIR / "output"
UTILITIES_DIR = DATA_DIR / "utilities"
REFERENCES_JSON = UTILITIES_DIR / "references.json"
IMPORT_HISTORY_CSV = UTILITIES_DIR / "import_history.csv"
DEFAULT_EXPORT_FILENAME_STEM = "referencias"

# Dias entre la fecha base (lanzamiento o ingreso tardio) y el desbloqueo.
# Unico valor compartido por tabla, tarjetas, cronologia y exportacion.
UNLOCK_OFFSET_DAYS = 21

PAGE_SIZE = 15
GANTT_PADDING_DAYS = 2
GANTT_DEFAULT_WINDOW_DAYS = 30
CALENDAR_MAX_ITEMS_PER_DAY = 3
IMPORT_HISTORY_LIMIT = 50
CHANGE_POLL_INTERVAL_MS = 500

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
