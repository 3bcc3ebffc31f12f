from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime options, read from INVENTORY_* environment variables or a .env file"""
    model_config = SettingsConfigDict(env_prefix="INVENTORY_", env_file=".env", extra="ignore")

    data_file: str = "inventory.csv"
    low_stock_threshold: int = 10
    log_level: str = "WARNING"


def get_settings() -> Settings:
    return Settings()
