import os

from dotenv import load_dotenv

# Developer overrides, if present, win over the test defaults below.
env_dev_path = os.path.join(os.path.dirname(__file__), ".env.dev")
if os.path.exists(env_dev_path):
    load_dotenv(env_dev_path, override=True)

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")

from libs.common.config import get_settings  # noqa: E402

# Settings may have been cached by an earlier import.
get_settings.cache_clear()
