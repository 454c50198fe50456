"""
Modulo di configurazione per l'applicazione Flask.
"""

import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Configurazione base, comune a tutti gli ambienti."""

    # Chiave segreta: in produzione deve essere sovrascritta da variabile d'ambiente
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # --- CONFIGURAZIONE DATABASE MYSQL --------------------------------------
    DB_USER = os.environ.get("DB_USER", "producao")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "producao")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = os.environ.get("DB_PORT", "3306")
    DB_NAME = os.environ.get("DB_NAME", "gestionale_produzione")

    # Stringa di connessione composta in modo parametrico
    DEFAULT_DB_URL = (
        f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )

    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", DEFAULT_DB_URL)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- LOGISTICA -----------------------------------------------------------
    # Numero massimo di giornate (bucket per data) tenute in cache per sessione
    LOGISTICS_CACHE_ENTRIES = int(os.environ.get("LOGISTICS_CACHE_ENTRIES", "10"))

    # Sessioni logistiche: chiusura dopo N minuti di inattività e numero massimo
    # di sessioni aperte (0 = nessun limite)
    LOGISTICS_SESSION_IDLE_MINUTES = int(os.environ.get("LOGISTICS_SESSION_IDLE_MINUTES", "120"))
    LOGISTICS_MAX_SESSIONS = int(os.environ.get("LOGISTICS_MAX_SESSIONS", "50"))

    # Caricamento dati di riferimento: tentativi extra e ritardo base (secondi).
    # Il ritardo cresce come base * 3^n (0.3s, 0.9s, 2.7s).
    REFERENCE_MAX_RETRIES = int(os.environ.get("REFERENCE_MAX_RETRIES", "3"))
    REFERENCE_RETRY_BASE_DELAY = float(
        os.environ.get("REFERENCE_RETRY_BASE_DELAY", "0.3")
    )

    # --- LOGGING -------------------------------------------------------------
    LOG_DIR = os.environ.get("LOG_DIR", str(BASE_DIR / "logs"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FILE_NAME = os.environ.get("LOG_FILE_NAME", "app.log")


class DevConfig(Config):
    """Configurazione per ambiente di sviluppo."""
    DEBUG = True
    ENV = "development"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "DEBUG")


class ProdConfig(Config):
    """Configurazione per ambiente di produzione."""
    DEBUG = False
    ENV = "production"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    """Configurazione per la suite pytest (SQLite in memoria, nessuna attesa)."""
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REFERENCE_RETRY_BASE_DELAY = 0.0
    LOG_LEVEL = "WARNING"
