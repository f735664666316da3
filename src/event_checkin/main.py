"""WSGI entry point: ``gunicorn event_checkin.main:app`` or ``python -m event_checkin.main``."""
import os

from . import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=bool(app.config.get("DEBUG")))
