from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///kanri.db"
    session_cookie: str = "kanri_session"
    session_max_age_seconds: int = 60 * 60 * 24
    cookie_secure: bool = False
    bcrypt_rounds: int = 10
    admin_username: str = "admin"
    admin_password: str = "adminpass"
    admin_device_code: str = "0000"
    admin_pass: str = "supersecretpass"  # secret accepted by POST /search
    banned_redirect_url: str = "https://google.com"
    search_redirect_url: str = "https://google.com/a"
    default_auth_mode: str = "free"
    log_level: str = "INFO"

    class Config:
        env_prefix = "KANRI_"


settings = Settings()
