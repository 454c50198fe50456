"""
Avvio rapido del gestionale di produzione con un singolo comando:

    python run_app.py

La configurazione si sceglie con la variabile d'ambiente APP_CONFIG
(``dev`` di default, ``prod`` per la produzione).
"""

from __future__ import annotations

import os

from app import create_app
from config import DevConfig, ProdConfig


def main() -> None:
    config_class = ProdConfig if os.environ.get("APP_CONFIG") == "prod" else DevConfig
    app = create_app(config_class)
    host = os.environ.get("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.environ.get("FLASK_RUN_PORT", "5000"))

    app.logger.info("Avvio dell'applicazione tramite run_app.py", extra={"component": "launcher"})
    app.run(host=host, port=port, debug=app.config.get("DEBUG", False), threaded=True)


if __name__ == "__main__":
    main()
