from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICEBAG_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Return the multi-line breakdown instead of the one-line total.
    detailed: bool = False


settings = Settings()
