"""Configuration management for the Flavor Allergen Chart application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('DATA_DIR', str(BASE_DIR / 'data')))
TEMPLATES_DIR: Final[Path] = BASE_DIR / 'templates'

# Reference catalog: local CSV path or http(s) URL serving {"rows": [...]}
REFERENCE_SOURCE: Final[str] = os.getenv('REFERENCE_SOURCE', str(DATA_DIR / 'master.csv'))
REFERENCE_TIMEOUT_SECONDS: Final[float] = float(os.getenv('REFERENCE_TIMEOUT_SECONDS', '10'))

# Share links
SHARE_BASE_URL: Final[str] = os.getenv('SHARE_BASE_URL', f"http://localhost:{APP_PORT}/")
# Longest link still rendered as a QR code (dense codes above this scan poorly)
MAX_QR_URL_LENGTH: Final[int] = int(os.getenv('MAX_QR_URL_LENGTH', '1200'))
