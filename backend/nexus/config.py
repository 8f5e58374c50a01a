# backend/nexus/config.py
import logging
import os

import psycopg2
from dotenv import load_dotenv

load_dotenv()

DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")

DB_NAME = os.getenv("DB_NAME", "nexus")
DB_USER = os.getenv("DB_USER", "")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")

# Κανένα query δεν κρεμάει το request επ' αόριστον
DB_CONNECT_TIMEOUT = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "10000"))

PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:8080,http://localhost:3000,http://localhost:5173",
    ).split(",")
    if origin.strip()
]

IMPRESSION_BASE_URL = os.getenv("IMPRESSION_BASE_URL", "https://api.adonmo.com/impression")

MERGE_MAX_DEPTH = int(os.getenv("MERGE_MAX_DEPTH", "32"))

CAMPAIGN_DATA_SOURCES = ("override", "inline")
CUSTOM_FIELD_PRECEDENCES = ("custom_wins", "canonical_wins")
NUMERIC_FALLBACKS = ("null", "zero")

CAMPAIGN_DATA_SOURCE = os.getenv("CAMPAIGN_DATA_SOURCE", "override")
CUSTOM_FIELD_PRECEDENCE = os.getenv("CUSTOM_FIELD_PRECEDENCE", "custom_wins")
NUMERIC_FALLBACK = os.getenv("NUMERIC_FALLBACK", "null")


def log_level() -> str:
    """Το LOG_LEVEL αν είναι έγκυρο, αλλιώς INFO (ώστε το import να μη σκάει)."""
    level = LOG_LEVEL.upper()
    return level if isinstance(logging.getLevelName(level), int) else "INFO"


def invalid_settings() -> list[str]:
    """
    Ελέγχει τις ρυθμίσεις με κλειστό σύνολο τιμών.
    Καλείται μία φορά στο startup, κενή λίστα = όλα καλά.
    """
    problems = []
    if not isinstance(logging.getLevelName(LOG_LEVEL.upper()), int):
        problems.append(f"LOG_LEVEL={LOG_LEVEL!r}")
    for name, value, allowed in (
        ("CAMPAIGN_DATA_SOURCE", CAMPAIGN_DATA_SOURCE, CAMPAIGN_DATA_SOURCES),
        ("CUSTOM_FIELD_PRECEDENCE", CUSTOM_FIELD_PRECEDENCE, CUSTOM_FIELD_PRECEDENCES),
        ("NUMERIC_FALLBACK", NUMERIC_FALLBACK, NUMERIC_FALLBACKS),
    ):
        if value not in allowed:
            problems.append(f"{name}={value!r} (expected one of {', '.join(allowed)})")
    return problems


def missing_credentials() -> list[str]:
    """
    Επιστρέφει τα ονόματα των credentials που λείπουν.
    Κενή λίστα = όλα καλά.
    """
    missing = []
    if not DB_USER:
        missing.append("DB_USER")
    if not DB_PASSWORD:
        missing.append("DB_PASSWORD")
    return missing


def get_db_connection():
    conn = psycopg2.connect(
        host=DB_HOST,
        port=DB_PORT,
        dbname=DB_NAME,
        user=DB_USER,
        password=DB_PASSWORD,
        connect_timeout=DB_CONNECT_TIMEOUT,
        options=f"-c statement_timeout={DB_STATEMENT_TIMEOUT_MS}",
    )
    return conn
