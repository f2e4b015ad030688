from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # JWT
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Banco de dados
    DATABASE_URL: str
    SQL_ECHO: bool = False

    LOG_LEVEL: str = "INFO"

    # matchmaking weights
    MATCH_WEIGHT_COMMUNITY: float = Field(1.0, ge=0)
    MATCH_WEIGHT_PROFESSION: float = Field(1.0, ge=0)
    MATCH_WEIGHT_LOCATION: float = Field(1.0, ge=0)
    MATCH_WEIGHT_RECENCY: float = Field(1.0, ge=0)

    # hard filters pushed down into the candidate query
    HARD_FILTERS_ENABLED: bool = True
    APPLY_AGE_FILTER: bool = True
    APPLY_HEIGHT_FILTER: bool = True
    APPLY_MARITAL_STATUS_FILTER: bool = True
    APPLY_PHYSICALLY_CHALLENGED_FILTER: bool = True
    APPLY_EDUCATION_FILTER: bool = True

    RECOMMENDATION_TIMEOUT_SECONDS: float = 10.0

    # celery
    REDIS_URL: str = "redis://localhost:6379/0"
    NOTIFICATIONS_ENABLED: bool = False
    NOTIFICATION_WORKERS: int = 2
    NOTIFICATION_TASK_TIME_LIMIT: int = 60

    # email
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    MAIL_FROM: str = ""
    MAIL_PASSWORD: str = ""

    class Config:
        env_file = ".env"


settings = Settings()
