from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "beliefscope"

    # Prior
    PRIOR_CONCENTRATION: float = 10.0

    # Evidence
    EVIDENCE_STRENGTH_SCALE: float = 5.0
    APPLY_CORRELATION_ADJUSTMENT: bool = False

    # Monte Carlo
    SAMPLE_COUNT: int = 10_000
    USE_QUASI_RANDOM: bool = True
    CREDIBLE_MASS: float = 0.95
    REJECTION_ATTEMPT_FACTOR: int = 100  # attempts per requested draw

    model_config = SettingsConfigDict(
        env_prefix="BELIEFSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
