"""
Application configuration.

Loads access control defaults from environment variables with sensible
defaults. These are the values every guard chain starts from before
its own options are merged in.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Access control defaults loaded from environment."""
    
    # ==========================================================================
    # Environment
    # ==========================================================================
    
    environment: str = "development"
    log_level: str = "INFO"
    
    # ==========================================================================
    # Path protection
    # ==========================================================================
    
    ignored_paths: list[str] = ["/favicon.ico"]
    secured_paths: list[str] = []
    required_logged_in: bool = False
    
    # ==========================================================================
    # Roles
    # ==========================================================================
    
    # All those roles will match any other role
    super_admin: list[str] = ["superadmin"]
    
    # ==========================================================================
    # Request / session binding
    # ==========================================================================
    
    login_path: str = "/login"
    req_key: str = "user"
    session_key: str = "credentials"
    session_secret: str = "dev-session-secret-change-in-production"
    
    # ==========================================================================
    # Helpers
    # ==========================================================================
    
    @property
    def is_production(self) -> bool:
        return self.environment == "production"
    
    class Config:
        env_prefix = "ROLEGUARD_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
