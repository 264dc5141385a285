from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "flashcards"

    # vuoto = eventi disabilitati
    rabbitmq_url: str = ""
    events_exchange: str = "flashcards.assignments"

    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    copy_title_prefix: str = "[Atribuição]"
    default_pontos_vale: int = 50

    log_level: str = "INFO"


settings = Settings()
