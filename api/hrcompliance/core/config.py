"""Application configuration."""
import sys
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://hr_user:hr_pass@db:5432/hr_compliance"
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    JWT_ISSUER: str | None = None
    JWT_AUDIENCE: str | None = None

    # Environment configuration
    ENVIRONMENT: str = "development"  # "development" or "production"
    LOG_LEVEL: str = "INFO"

    # CORS configuration - comma-separated origins
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8080"

    # Compliance engine tuning
    EXPIRY_WARNING_DAYS: int = 30
    OVERRIDE_MAX_DAYS: int = 14

    # Restrict evaluations to employees of the caller's organisation
    ENFORCE_TENANT_SCOPE: bool = False

    class Config:
        env_file = ".env"

    def get_cors_origins(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def validate_production_settings(self) -> None:
        """Validate settings for production environment.

        Raises SystemExit if critical security settings are misconfigured.
        """
        if self.ENVIRONMENT == "production":
            if self.SECRET_KEY == "dev-secret-key-change-in-production":
                print("FATAL: SECRET_KEY must be changed in production!", file=sys.stderr)
                print("Set a secure random SECRET_KEY environment variable.", file=sys.stderr)
                sys.exit(1)

            if not self.ENFORCE_TENANT_SCOPE:
                print("WARNING: compliance evaluations are not tenant scoped.", file=sys.stderr)
                print("Set ENFORCE_TENANT_SCOPE=true to restrict callers to their organisation.", file=sys.stderr)


settings = Settings()
# Validate on startup
settings.validate_production_settings()
