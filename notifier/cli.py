"""
Command line diagnostics for the messaging gateway.
"""

import asyncio
import json

import click

from .config import Settings
from .domain import NotifierError
from .domain.value_objects import MessageEnvelope
from .gateway import PhoneNormalizer
from .infrastructure.logging import configure_logging
from .main import create_delivery_engine, create_diagnostics, create_gateway_discovery

DISCOVERY_TEST_NUMBER = "919999999999"


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Messaging gateway tools."""
    settings = Settings()
    configure_logging(settings.service_name, settings.log_level)
    ctx.obj = settings


@cli.command()
@click.pass_obj
def probe(settings: Settings) -> None:
    """Find which credential parameter the gateway accepts (sends nothing)."""
    try:
        credential = settings.require_credential()
        result = asyncio.run(create_diagnostics(settings).probe_credentials(credential))
    except NotifierError as e:
        raise click.ClickException(str(e)) from e

    _echo_json(
        {
            "authenticated": result.authenticated,
            "parameter_name": result.parameter_name,
            "response": result.response,
            "attempts": [a.to_dict() for a in result.trace],
        }
    )
    if not result.authenticated:
        raise SystemExit(1)


@cli.command("credits")
@click.pass_obj
def show_credits(settings: Settings) -> None:
    """Show the gateway account balance."""
    try:
        credential = settings.require_credential()
        response = asyncio.run(create_diagnostics(settings).check_credits(credential))
    except NotifierError as e:
        raise click.ClickException(str(e)) from e
    _echo_json(response)


@cli.command()
@click.argument("test_number", required=False)
@click.pass_obj
def discover(settings: Settings, test_number: str | None) -> None:
    """Find a working send configuration by test-sending to TEST_NUMBER.

    This sends a real message when a configuration works.
    """
    try:
        credential = settings.require_credential()
        recipient = PhoneNormalizer(settings.default_country_code).normalize(
            test_number or settings.admin_whatsapp_number or DISCOVERY_TEST_NUMBER
        )
        result = asyncio.run(create_gateway_discovery(settings).discover(credential, recipient))
    except (NotifierError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    _echo_json(result.to_dict())
    if not result.success:
        raise SystemExit(1)


@cli.command()
@click.argument("phone")
@click.argument("message")
@click.option("--attachment-url", default=None, help="Media URL to send with the message.")
@click.option("--deadline", type=float, default=None, help="Overall time budget in seconds.")
@click.pass_obj
def send(
    settings: Settings,
    phone: str,
    message: str,
    attachment_url: str | None,
    deadline: float | None,
) -> None:
    """Send MESSAGE to PHONE, trying every gateway configuration in order."""
    try:
        credential = settings.require_credential()
        envelope = MessageEnvelope(
            recipient=PhoneNormalizer(settings.default_country_code).normalize(phone),
            body=message,
            attachment_url=attachment_url,
        )
    except (NotifierError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    engine = create_delivery_engine(settings)
    outcome = asyncio.run(engine.send(envelope, credential, deadline=deadline))
    _echo_json(outcome.to_dict())
    if not outcome.success:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
