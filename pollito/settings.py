"""
pollito.settings
================

Configuration settings for the Pollito farm backend.

This module provides centralized configuration options that can be used across
the application. It includes default values that can be overridden via
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

# ---------------------------------------------------------------------------
# Base directories
# ---------------------------------------------------------------------------
# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Database settings
# ---------------------------------------------------------------------------
DB_FILE = os.environ.get("POLLITO_DB_FILE", BASE_DIR / "pollito.db")
DB_URL = f"sqlite:///{DB_FILE}"
DB_ECHO = os.environ.get("POLLITO_DB_ECHO", "False").lower() == "true"

# Storage backend used by the API: "sqlite" or "memory"
STORAGE_BACKEND = os.environ.get("POLLITO_STORAGE", "sqlite").lower()

# API settings
# ---------------------------------------------------------------------------
API_HOST = os.environ.get("POLLITO_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("POLLITO_API_PORT", "8000"))
API_DEBUG = os.environ.get("POLLITO_API_DEBUG", "False").lower() == "true"

# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("POLLITO_LOG_LEVEL", "INFO").upper()


# ---------------------------------------------------------------------------
# Pydantic settings model for farm rules
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Farm rules and API options, loaded from environment variables."""

    coop_count: int = Field(7, ge=1, description="Number of coop slots in the rotation pipeline")
    sales_coop_number: int = Field(1, ge=1, description="Coop that invoices deduct stock from")
    invoice_prefix: str = Field("Fact-", description="Literal prefix of invoice numbers")
    invoice_number_width: int = Field(4, ge=1, description="Zero-padded width of the invoice counter")

    business_name: str = Field("Pollo Fresco El Pollito", description="Header of shared invoices")
    business_slogan: str = Field("Quien sabe de calidad compra el Pollito", description="Line under the header")
    business_location: str = Field("Peña Blanca, Cortés", description="Address printed on shared invoices")
    business_phones: str = Field("97164446 - 97550488", description="Contact numbers printed on shared invoices")
    currency_symbol: str = Field("L.", description="Currency symbol used in messages")

    cors_origins: List[str] = Field(
        default=[
            "http://localhost:5173",    # Vite dev server default port
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        description="Origins allowed by the CORS middleware",
    )

    class Config:
        """Configuration for the settings model."""
        env_prefix = "POLLITO_"
        env_file = ".env"  # load from .env file if present
        case_sensitive = False
        extra = "ignore"


# Initialize settings
settings = Settings()
