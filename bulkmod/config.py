from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./bulkmod.db"
    test_database_url: str = "sqlite:///./bulkmod_test.db"
    create_schema: bool = True
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    token_expire_hours: int = 24
    cors_origins: list[str] = ["http://localhost:5173"]
    api_prefix: str = "/api"
    log_level: str = "INFO"

    model_config = {"env_prefix": "BULKMOD_", "env_file": ".env"}


settings = Settings()
