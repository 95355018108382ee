from datetime import time
from typing import Annotated, Any

import pytz
from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

LINK_PROVIDERS = ("jitsi", "google_meet", "doxy_me", "doximity", "template")


class Settings(BaseSettings):
    """
    Configuración de la aplicación utilizando Pydantic BaseSettings.
    Carga automáticamente las variables de entorno.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Telehealth Bridge API"
    PROJECT_DESCRIPTION: str = "Puente entre turnos y videoconsultas (telesalud, Jitsi, Google Meet, Doxy.me)"
    VERSION: str = "1.0.0"

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="Host de PostgreSQL")
    DB_PORT: int = Field(5432, description="Puerto de PostgreSQL")
    DB_NAME: str = Field("telehealth", description="Nombre de la base de datos")
    DB_USER: str = Field("postgres", description="Usuario de PostgreSQL")
    DB_PASSWORD: str | None = Field(None, description="Contraseña de PostgreSQL")
    DB_ECHO: bool = Field(False, description="Log SQL queries (solo para debug)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(10, description="Tamaño del pool de conexiones")
    DB_MAX_OVERFLOW: int = Field(20, description="Máximo overflow del pool")
    DB_POOL_RECYCLE: int = Field(3600, description="Reciclar conexiones cada X segundos")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout para obtener conexión del pool")

    # Telesalud backend
    TELESALUD_API_URL: str | None = Field(None, description="URL base de la API de telesalud")
    TELESALUD_API_TOKEN: str | None = Field(None, description="Token Bearer para la API de telesalud")
    TELESALUD_NOTIFICATION_URL: str | None = Field(
        None, description="URL pública del webhook que telesalud notifica (POST /telehealth/webhook)"
    )
    TELESALUD_DAYS_BEFORE_EXPIRATION: int = Field(7, description="Días de validez del link de videoconsulta")
    TELESALUD_MAX_ATTEMPTS: int = Field(3, description="Intentos totales ante errores transitorios")
    TELESALUD_CONNECT_TIMEOUT: float = Field(5.0, description="Timeout de conexión en segundos")
    TELESALUD_TIMEOUT: float = Field(10.0, description="Timeout total por request en segundos")
    TELESALUD_DEADLINE: float = Field(30.0, description="Tiempo máximo total incluyendo reintentos")
    TELESALUD_RETRY_BASE_DELAY: float = Field(1.0, description="Demora inicial del backoff exponencial (segundos)")
    TELESALUD_RETRY_MAX_DELAY: float = Field(5.0, description="Demora máxima del backoff (segundos)")
    TELESALUD_RETRY_JITTER: float = Field(1.0, description="Jitter aleatorio máximo (segundos)")
    TELESALUD_INTERNAL_HOST: str | None = Field(
        None, description="Hostname interno (contenedor) a reemplazar. Por defecto el host de TELESALUD_API_URL"
    )
    TELESALUD_PUBLIC_HTTPS_URL: str | None = Field(None, description="URL pública HTTPS del backend")
    TELESALUD_PUBLIC_HTTP_URL: str | None = Field(None, description="URL pública HTTP del backend")
    TELESALUD_WEBHOOK_TOKEN: str | None = Field(
        None, description="Token Bearer exigido en el webhook entrante (opcional)"
    )

    # Standalone providers
    TELEHEALTH_PROVIDER: str = Field("jitsi", description="Proveedor local: jitsi, google_meet, doxy_me, doximity, template")
    JITSI_BASE_URL: str = Field("https://meet.jit.si", description="URL base de Jitsi")
    DOXY_ROOM_URL: str | None = Field(None, description="Sala fija de Doxy.me")
    DOXIMITY_ROOM_URL: str | None = Field(None, description="Sala fija de Doximity")
    TELEHEALTH_TEMPLATE_URL: str | None = Field(None, description="Plantilla de URL con {{slug}}")
    TELEHEALTH_JOIN_WINDOW_MINUTES: int = Field(
        120, description="Ventana de ingreso (± minutos respecto del turno). 0 deshabilita"
    )
    TELEHEALTH_SMS_INVITES: bool = Field(False, description="Enviar invitación también por SMS")
    NOTIFICATIONS_PAGE_SIZE: int = Field(20, description="Máximo de notificaciones no leídas por consulta")
    TELEHEALTH_TIMEZONE: str = Field("UTC", description="Zona horaria de la clínica (recordatorios, \"hoy\")")

    # Reminders
    TELEHEALTH_REMINDER_DAY_BEFORE: bool = Field(False, description="Recordatorio el día anterior")
    TELEHEALTH_REMINDER_HOUR_BEFORE: bool = Field(False, description="Recordatorio una hora antes")
    TELEHEALTH_REMINDER_DAY_TIME: str = Field(
        "17:00", description="Hora local (HH:MM) del recordatorio del día anterior"
    )
    TELEHEALTH_REMINDER_INTERVAL_MINUTES: int = Field(5, description="Minutos entre ejecuciones del scheduler")

    # CORS
    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = Field(default=["*"], description="Orígenes permitidos para CORS")

    DEBUG: bool = Field(False, description="Modo de depuración")
    ENVIRONMENT: str = Field("production", description="Entorno de ejecución")
    LOG_LEVEL: str = Field("INFO", description="Nivel de logging")

    # Sentry
    SENTRY_DSN: str | None = Field(None, description="DSN de Sentry (vacío deshabilita)")
    SENTRY_TRACES_SAMPLE_RATE: float = Field(0.1, description="Muestreo de trazas de Sentry")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignorar campos extras en lugar de generar un error
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("TELESALUD_API_URL", "TELESALUD_PUBLIC_HTTPS_URL", "TELESALUD_PUBLIC_HTTP_URL", mode="before")
    @classmethod
    def normalize_url(cls, value):
        if isinstance(value, str):
            value = value.strip().rstrip("/")
            return value or None
        return value

    @field_validator("TELEHEALTH_PROVIDER", mode="before")
    @classmethod
    def validate_provider(cls, value):
        value = (value or "jitsi").strip().lower()
        if value not in LINK_PROVIDERS:
            raise ValueError(f"TELEHEALTH_PROVIDER must be one of: {', '.join(LINK_PROVIDERS)}")
        return value

    @field_validator("TELEHEALTH_TIMEZONE")
    @classmethod
    def validate_timezone(cls, value):
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @field_validator("TELEHEALTH_REMINDER_DAY_TIME")
    @classmethod
    def validate_day_time(cls, value):
        value = value.strip()
        try:
            time.fromisoformat(value)
        except ValueError as e:
            raise ValueError("TELEHEALTH_REMINDER_DAY_TIME must be HH:MM") from e
        return value

    @field_validator(
        "TELESALUD_MAX_ATTEMPTS", "TELESALUD_DAYS_BEFORE_EXPIRATION", "TELEHEALTH_REMINDER_INTERVAL_MINUTES"
    )
    @classmethod
    def validate_positive(cls, v):
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @computed_field
    @property
    def is_development(self) -> bool:
        """Determina si está en modo desarrollo"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @computed_field
    @property
    def telesalud_enabled(self) -> bool:
        """Modo telesalud: requiere URL y token"""
        return bool(self.TELESALUD_API_URL and self.TELESALUD_API_TOKEN)

    @computed_field
    @property
    def database_url(self) -> str:
        """Construye la URL de conexión a PostgreSQL"""
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"


# Singleton para configuración
_settings_instance = None


def get_settings() -> Settings:
    """
    Retorna una instancia cacheada de la configuración.
    Esto evita cargar las variables de entorno múltiples veces.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
