"""ASGI entrypoint for the onboarding wizard API."""

from onboarding_wizard.api.app import create_app
from onboarding_wizard.containers import build_container

app = create_app(build_container())
