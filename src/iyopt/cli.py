import json
import logging

import click
import uvicorn

from iyopt.client import Client
from iyopt.config import IyoptSettings
from iyopt.errors import IyoptError
from iyopt.log import configure_logging
from iyopt.model import Reward

logger = logging.getLogger(__name__)


def _build_client(ctx: click.Context) -> Client:
    return Client.from_settings(ctx.obj["settings"])


@click.group()
@click.option("--account-id", default=None, type=int, help="lab account id")
@click.option("--lab-id", default=None, help="lab id")
@click.option("--base-url", default=None, help="lab service base url")
@click.pass_context
def cli(ctx: click.Context, account_id: int | None, lab_id: str | None, base_url: str | None) -> None:
    """iyopt lab client cli."""
    svc_settings = IyoptSettings()
    if account_id is not None:
        svc_settings.account_id = account_id
    if lab_id:
        svc_settings.lab_id = lab_id
    if base_url:
        svc_settings.base_url = base_url
    configure_logging(svc_settings)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = svc_settings


@cli.command()
@click.argument("user")
@click.pass_context
def suggest(ctx: click.Context, user: str) -> None:
    """fetch the suggestion for USER."""
    with _build_client(ctx) as client:
        try:
            suggestion = client.suggestion(user)
        except IyoptError as e:
            raise click.ClickException(str(e))
    click.echo(json.dumps(suggestion.to_dict()))


@cli.command()
@click.argument("token")
@click.pass_context
def reward(ctx: click.Context, token: str) -> None:
    """report the reward for TOKEN."""
    with _build_client(ctx) as client:
        try:
            client.reward(Reward(token=token))
        except IyoptError as e:
            raise click.ClickException(str(e))
    click.echo("rewarded")


@cli.command()
@click.option("--host", default=None, help="http server host")
@click.option("--port", default=None, type=int, help="http server port")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """run the http front for the configured lab."""
    from iyopt.http import create_app

    svc_settings: IyoptSettings = ctx.obj["settings"]
    host = host or svc_settings.http_host
    port = port or svc_settings.http_port

    with _build_client(ctx) as client:
        app = create_app(client)
        logger.info(f"starting iyopt http server on {host}:{port}")
        uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
