import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


SIMPLEPAY_AWS_ACCESS_KEY_ID = os.getenv("SIMPLEPAY_AWS_ACCESS_KEY_ID")
SIMPLEPAY_AWS_SECRET_ACCESS_KEY = os.getenv("SIMPLEPAY_AWS_SECRET_ACCESS_KEY")
SIMPLEPAY_ACCOUNT_ID = os.getenv("SIMPLEPAY_ACCOUNT_ID")
SIMPLEPAY_USE_SANDBOX = _env_flag("SIMPLEPAY_USE_SANDBOX")
SIMPLEPAY_TIMEZONE = os.getenv("SIMPLEPAY_TIMEZONE", "UTC")
