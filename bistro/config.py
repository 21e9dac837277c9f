from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BISTRO_",
        env_file=Path(__file__).parent.parent / ".env",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "text"  # "json" | "text"
    log_to_file: bool = False
    log_dir: Path = Path(__file__).parent.parent / "logs"

    # бронирования
    max_guests_per_reservation: int = 12
    max_time_slot: int = 15
    booking_horizon_months: int = 3
    total_tables: int = 15

    # меню и статистика
    default_cuisine: str = "continental"
    popular_items_limit: int = 10

    def check(self) -> None:
        """Проверка согласованности значений при старте"""
        if self.log_format not in ("json", "text"):
            raise ValueError(f"BISTRO_LOG_FORMAT должен быть json или text, получено: {self.log_format}")
        if self.max_guests_per_reservation < 1:
            raise ValueError("BISTRO_MAX_GUESTS_PER_RESERVATION должен быть >= 1")
        if self.max_time_slot < 1:
            raise ValueError("BISTRO_MAX_TIME_SLOT должен быть >= 1")
        if self.total_tables < 1:
            raise ValueError("BISTRO_TOTAL_TABLES должен быть >= 1")


settings = Settings()
