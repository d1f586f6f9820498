from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):

    # Database
    database_url: str
    auto_create_tables: bool = True


    # Auth/JWT
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7
    jwt_algorithm: str = 'HS256'
    secret_key: str
    rate_limit_enabled: bool = True

    # Mail config
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""
    mail_suppress_send: bool = False

    # App
    app_name: str = 'Familien-Ferienwohnungen'
    debug: bool = False
    log_dir: str = "logs"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",

    )

    # Reservierungen
    default_color: str = "#3b82f6"
    max_stay_days: int = 366


settings = Settings()
