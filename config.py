import os
from dataclasses import dataclass
from enum import Enum

from dotenv import load_dotenv

load_dotenv()


class TargetEnvironment(Enum):
    SANDBOX = "sandbox.payfast.co.za"
    PRODUCTION = "www.payfast.co.za"

    @property
    def host(self) -> str:
        return self.value

    @property
    def process_url(self) -> str:
        return f"https://{self.host}/eng/process"

    @property
    def validate_url(self) -> str:
        return f"https://{self.host}/eng/query/validate"


@dataclass(frozen=True)
class Settings:
    merchant_id: str
    merchant_key: str
    passphrase: str = ""
    environment: TargetEnvironment = TargetEnvironment.SANDBOX
    public_base_url: str | None = None
    item_name: str = "Donation to I.C Norath NGO"
    item_description: str = "Charitable donation"
    app_success_url: str = "wilapp://donation/success"
    app_cancel_url: str = "wilapp://donation/cancelled"
    timezone: str = "Africa/Johannesburg"
    itn_validate: bool = True
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _target_environment() -> TargetEnvironment:
    name = os.getenv("PF_ENVIRONMENT", "").strip().lower()
    if not name:
        # NODE_ENV-style switch used by the hosted deployment
        name = os.getenv("APP_ENV", "").strip().lower()
    if name == "production":
        return TargetEnvironment.PRODUCTION
    return TargetEnvironment.SANDBOX


def load_settings() -> Settings:
    """Build :class:`Settings` from the process environment (and ``.env``)."""
    merchant_id = os.getenv("PF_MERCHANT_ID", "").strip()
    merchant_key = os.getenv("PF_MERCHANT_KEY", "").strip()
    missing = [
        name
        for name, value in (("PF_MERCHANT_ID", merchant_id), ("PF_MERCHANT_KEY", merchant_key))
        if not value
    ]
    if missing:
        raise EnvironmentError(f"Missing required environment variables: {', '.join(missing)}")

    defaults = Settings(merchant_id=merchant_id, merchant_key=merchant_key)
    return Settings(
        merchant_id=merchant_id,
        merchant_key=merchant_key,
        passphrase=os.getenv("PF_PASSPHRASE", ""),
        environment=_target_environment(),
        public_base_url=(os.getenv("PUBLIC_BASE_URL") or os.getenv("RENDER_URL") or None),
        item_name=os.getenv("DONATION_ITEM_NAME", defaults.item_name),
        item_description=os.getenv("DONATION_ITEM_DESCRIPTION", defaults.item_description),
        app_success_url=os.getenv("APP_SUCCESS_URL", defaults.app_success_url),
        app_cancel_url=os.getenv("APP_CANCEL_URL", defaults.app_cancel_url),
        timezone=os.getenv("TIMEZONE", defaults.timezone),
        itn_validate=_env_flag("ITN_VALIDATE", defaults.itn_validate),
        host=os.getenv("HOST", defaults.host),
        port=int(os.getenv("PORT", defaults.port)),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )
