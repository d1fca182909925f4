from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"

    # Сроки жизни приглашений и присутствия
    invitation_ttl_days: int = 7
    presence_window_seconds: int = 30
    presence_retention_minutes: int = 60

    log_level: str = "INFO"
    sql_echo: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
