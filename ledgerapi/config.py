from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="ledgerapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "Device Ledger API"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_HOST: str = ""
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = ""
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DATABASE: str = ""

    # 직접 지정 시 POSTGRES_* 값보다 우선
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if not self.POSTGRES_HOST:
            return "sqlite:///./ledgerapi.db"

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Security
    DEVICE_HASH_SECRET: str = "change-me-in-production"

    # Registration
    DEVICE_ID_MIN_LENGTH: int = 10
    WELCOME_BONUS_TOKENS: int = 100  # 가입 축하 토큰
    MAX_ACCOUNTS_PER_DEVICE: int = 3  # 기기당 계정 생성 한도
    DEVICE_CREATION_WINDOW_DAYS: int = 365  # 생성 한도 적용 기간 (일)
    NICKNAME_PREFIX: str = "익명"
    NICKNAME_MIN_LENGTH: int = 2
    NICKNAME_MAX_LENGTH: int = 20

    # Attendance
    WEEKDAY_ATTENDANCE_REWARD: int = 10  # 평일 출석 보상
    WEEKEND_ATTENDANCE_REWARD: int = 30  # 주말 출석 보상

    # Recovery
    RECOVERY_CODE_LENGTH: int = 12
    RECOVERY_CODE_GROUP_SIZE: int = 4
    RECOVERY_CODE_MAX_ATTEMPTS: int = 10
    TRANSFER_COPY_BATCH_SIZE: int = 500  # 이전 시 하위 문서 복사 배치 크기

    # Transactions
    TRANSACTION_MAX_ATTEMPTS: int = 5

    # Discussions
    POPULAR_DISCUSSIONS_LIMIT: int = 20


settings = Settings()
