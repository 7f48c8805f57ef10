from pathlib import Path
from dotenv import load_dotenv
import os
import pytz

load_dotenv(Path(__file__).parent.parent.parent / '.env', override=True)

def env_bool(name: str, default: bool = False) -> bool:
    return str(os.getenv(name, str(default))).strip().lower() in {"1", "true", "yes", "on", "y", "t"}

class Settings:
    # Formatting defaults
    DEFAULT_LOCALE = os.getenv('FORMAT_LOCALE', 'en-US')
    DEFAULT_CURRENCY = os.getenv('FORMAT_CURRENCY', 'USD')

    # Timezone for naive datetimes
    SERVER_TZ = pytz.timezone(os.getenv('SERVER_TZ')) if os.getenv('SERVER_TZ') else pytz.UTC

    # Logs
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_TO_FILE = env_bool("LOG_TO_FILE", False)
    LOGS_DIR = Path(os.getenv('LOGS_DIR', Path.cwd() / "logs"))
    LOG_FILE = LOGS_DIR / "formatters.log"
