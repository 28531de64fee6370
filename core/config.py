from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from labseat import EngineConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LABSEAT_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Hackathon Lab Allocation"
    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///./labseat.db"
    log_file: str = "logs/labseat.log"
    log_rotation: str = "10 MB"
    log_retention: str = "7 days"

    max_team_size: int = 5
    min_offered_problems: int = 1
    max_offered_problems: int = 3
    default_max_refreshes: int = 2
    min_custom_problem_length: int = 10

    def engine_config(self) -> EngineConfig:
        return EngineConfig(
            max_team_size=self.max_team_size,
            min_offered_problems=self.min_offered_problems,
            max_offered_problems=self.max_offered_problems,
            default_max_refreshes=self.default_max_refreshes,
            min_custom_problem_length=self.min_custom_problem_length,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
