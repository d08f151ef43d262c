from atams import AtamsBaseSettings


class Settings(AtamsBaseSettings):
    """
    Application Settings

    Inherits from AtamsBaseSettings which includes:
    - DATABASE_URL (required)
    - ATLAS_SSO_URL, ATLAS_APP_CODE, ATLAS_ENCRYPTION_KEY, ATLAS_ENCRYPTION_IV
    - ENCRYPTION_ENABLED, ENCRYPTION_KEY, ENCRYPTION_IV (response encryption)
    - LOGGING_ENABLED, LOG_LEVEL, LOG_TO_FILE, LOG_FILE_PATH
    - CORS_ORIGINS, CORS_ALLOW_CREDENTIALS, CORS_ALLOW_METHODS, CORS_ALLOW_HEADERS
    - DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_RECYCLE, DB_POOL_TIMEOUT, DB_POOL_PRE_PING
    - DEBUG

    All settings can be overridden via .env file or by redefining them here.
    """
    APP_NAME: str = "Kiosk Attendance"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Kiosk session settings
    KIOSK_SESSION_TTL_HOURS: int = 2
    KIOSK_TOKEN_BYTES: int = 32

    # Scan classification policy
    ATTENDANCE_GRACE_PERIOD_MINUTES: int = 15
    ATTENDANCE_TIMEZONE: str = "UTC"

    # PostgreSQL connect and statement timeout; pool checkout uses DB_POOL_TIMEOUT
    STORE_TIMEOUT_SECONDS: int = 10


settings = Settings()
