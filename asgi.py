"""Web server application for the Keyper service."""

from keyper.factory import create_app

app = create_app()
