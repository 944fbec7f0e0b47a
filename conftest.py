import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_env_defaults = {
    "ENVIRONMENT": "test",
    "LOG_LEVEL": "DEBUG",
    "API_URL": "https://api.test",
    "REDIS_URL": "redis://127.0.0.1:6379",
    "STORE_KEY_PREFIX": "wodscale-test:",
}
for key, value in _env_defaults.items():
    os.environ.setdefault(key, value)
