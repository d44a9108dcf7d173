#setup: python -m venv .venv
#setup: source .venv/bin/activate   # (windows: .venv\Scripts\activate)
#setup: pip install -U pip -e ".[test]"
#setup: flask --app yieldfarm.wsgi run --port 3000 --debug

from __future__ import annotations

import logging

from yieldfarm.app import create_app
from yieldfarm.config import AppSettings

settings = AppSettings()
app = create_app(settings)

logger = logging.getLogger("yieldfarm")
logger.info("YieldFarm API ready (store=%s, db=%s)", settings.STORE, settings.DB_PATH)


if __name__ == "__main__":
    app.run(port=3000, debug=True)
