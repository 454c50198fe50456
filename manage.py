#!/usr/bin/env python3
"""
Script di avvio per il gestionale di produzione (logistica e anagrafiche).

Uso:
    python manage.py runserver               # Avvia il server di sviluppo
    python manage.py create-db               # Crea le tabelle del database
    python manage.py seed-roles              # Crea i ruoli ADMIN/PRODUCAO e i permessi
    python manage.py --config prod create-db # Usa la configurazione di produzione
"""

import argparse
import logging
import os

from sqlalchemy.exc import OperationalError as SAOperationalError
from pymysql.err import OperationalError as MySQLOperationalError

from app import create_app
from app.extensions import db
from config import DevConfig, ProdConfig

CONFIGS = {"dev": DevConfig, "prod": ProdConfig}

# ---------------------------------------------------------------------
# Logger CLI (fuori dal contesto Flask)
# ---------------------------------------------------------------------
cli_logger = logging.getLogger("manage_cli")
cli_logger.setLevel(logging.INFO)

if not cli_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(levelname)s: %(name)s: %(message)s")
    )
    cli_logger.addHandler(handler)


# ---------------------------------------------------------------------
# Comandi
# ---------------------------------------------------------------------
def create_db(app) -> bool:
    """Crea tutte le tabelle definite nei modelli SQLAlchemy."""
    from app import models  # noqa: F401

    with app.app_context():
        cli_logger.info("Creazione delle tabelle nel database...")
        try:
            db.create_all()
        except (SAOperationalError, MySQLOperationalError) as e:
            cli_logger.error("Errore di connessione o permessi sul database: %s", e)
            cli_logger.info(
                "Verifica che MySQL sia attivo e che l'utente '%s' abbia accesso al DB '%s'.",
                app.config.get("DB_USER"),
                app.config.get("DB_NAME"),
            )
            return False
        cli_logger.info("Database creato con successo.")
        return True


def seed_roles(app) -> bool:
    """Crea i ruoli di default con i permessi sulle pagine."""
    from app.services.admin_service import seed_default_roles
    from app.services.results import Err

    with app.app_context():
        result = seed_default_roles()
        if isinstance(result, Err):
            cli_logger.error("Creazione ruoli non riuscita (%s): %s", result.kind.value, result.message)
            return False
        cli_logger.info("Ruoli disponibili: %s", ", ".join(sorted(result.value)))
        return True


def run_server(app) -> None:
    """Avvia il server di sviluppo Flask (LAN-ready)."""
    host = os.environ.get("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.environ.get("FLASK_RUN_PORT", "5000"))
    debug = app.config.get("DEBUG", False)

    app.logger.info("Avvio del server su http://%s:%s", host, port)
    app.run(host=host, port=port, debug=debug, threaded=True)


# ---------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------
def main() -> None:
    parser = argparse.ArgumentParser(
        description="Gestione del gestionale di produzione."
    )
    parser.add_argument(
        "--config",
        choices=sorted(CONFIGS),
        default="dev",
        help="Configurazione da usare (default: dev).",
    )
    parser.add_argument(
        "command",
        choices=["runserver", "create-db", "seed-roles"],
        help="Comando da eseguire.",
    )

    args = parser.parse_args()
    app = create_app(CONFIGS[args.config])

    if args.command == "runserver":
        run_server(app)
    elif args.command == "create-db":
        raise SystemExit(0 if create_db(app) else 1)
    elif args.command == "seed-roles":
        raise SystemExit(0 if seed_roles(app) else 1)


if __name__ == "__main__":
    main()
