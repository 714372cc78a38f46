"""
wsgi.py — Entry point for WSGI servers and the flask CLI.

    FLASK_CONFIG=production flask --app clubsphere.wsgi run
    flask --app clubsphere.wsgi seed
"""

import os

from clubsphere.app import create_app

app = create_app(os.getenv("FLASK_CONFIG", "development"))
