from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Estimate Intake"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Question templates: empty means the JSON files shipped with the package
    TEMPLATES_DIR: str = ""
    DEFAULT_TEMPLATE_ID: str = "single_storey_extension"

    # Derived lengths: False restores unconditional overwrite on every width/support edit
    PRESERVE_MANUAL_DERIVED_FIELDS: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
