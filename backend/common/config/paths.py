"""Path configuration for the backend."""
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=BASE_DIR / ".env")

# Directories
DATA_DIR = BASE_DIR / "data"
LABELS_DATA_DIR = BASE_DIR / "labels" / "data"

# Static label data and calibration persistence
NTA_CENTROIDS_PATH = LABELS_DATA_DIR / "nta_centroids.json"
DEFAULT_CALIBRATION_POINTS_PATH = DATA_DIR / "calibration" / "points.json"
