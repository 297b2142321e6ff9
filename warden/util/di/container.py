"""Production container for the warden API."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka

from warden.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Build the container with the real database, identity provider and mailer."""
    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*provider_instances, FastapiProvider())


def setup_di(app, container: AsyncContainer) -> None:
    """Attach the container to the app so routes resolve use cases per request."""
    setup_dishka(container, app)
