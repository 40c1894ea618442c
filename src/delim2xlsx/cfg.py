from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


def _split(value: str) -> list[str]:
    return [x.strip() for x in value.split(",") if x.strip()]


class Settings(BaseSettings):
    # ── LOG
    LOG_LEVEL: str = Field(default="INFO")

    # ── Wejście (rozszerzenia po przecinku, np. ".csv,.txt")
    EXTENSIONS: str = Field(default=".csv,.tsv,.txt")
    SAMPLE_LINES: int = Field(default=2, ge=1)
    ENCODING: str = Field(default="utf-8-sig")

    # ── Wyjście (pusty katalog → obok pliku źródłowego)
    OUTPUT_DIR: str = Field(default="")
    KEEP_TEXT: bool = Field(default=False)
    OPEN_AFTER: bool = Field(default=False)

    # ── SMTP (opcjonalnie)
    SMTP_HOST: str = Field(default="")
    SMTP_PORT: int = Field(default=25)
    SMTP_USER: str = Field(default="")
    SMTP_PASSWORD: str = Field(default="")
    SMTP_STARTTLS: bool = Field(default=False)

    MAIL_FROM: str = Field(default="")
    MAIL_TO: str = Field(default="")
    MAIL_SUBJECT: str = Field(default="Arkusze")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    def extension_list(self) -> list[str]:
        """'.csv, TXT' → ['.csv', '.txt'] (kropka dokładana, małe litery)."""
        return [e.lower() if e.startswith(".") else "." + e.lower() for e in _split(self.EXTENSIONS)]

    def mail_recipients(self) -> list[str]:
        return _split(self.MAIL_TO)


settings = Settings()
