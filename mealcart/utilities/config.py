"""Configuration management for the Meal Cart application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'

# Household defaults
DEFAULT_HOUSEHOLD_SERVINGS: Final[int] = int(os.getenv('DEFAULT_HOUSEHOLD_SERVINGS', '4'))

# Recipe import
IMPORT_TIMEOUT_SECONDS: Final[float] = float(os.getenv('IMPORT_TIMEOUT_SECONDS', '15'))
READ_PROXY_BASE_URL: Final[str] = os.getenv('READ_PROXY_BASE_URL', 'https://r.jina.ai/')
IMPORT_USER_AGENT: Final[str] = os.getenv('IMPORT_USER_AGENT', 'mealcart-importer/1.0')

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('MEALCART_DATA_DIR', str(BASE_DIR / 'data')))
