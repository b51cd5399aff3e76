"""
Huddle CLI - Command Line Interface for the Huddle protocol

Main entry point for all CLI commands.
"""

import logging

import click
from pydantic import ValidationError

from huddle import __version__
from huddle.core.config import load_config
from huddle.utils.logger import setup_logging

HOUR = 3600
START_TIME = 1_700_000_000


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help="Path to a .env file")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, debug, env_file):
    """Huddle - auction scheduled meeting slots to the highest bidder"""
    try:
        config = load_config(env_file)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration:\n{exc}")

    level = logging.DEBUG if debug else getattr(logging, config.log_level)
    setup_logging(level=level, log_dir=config.log_dir)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# =============================================================================
# Config Command
# =============================================================================


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show effective configuration"""
    config = ctx.obj["config"]
    click.echo("Huddle Configuration")
    click.echo("-" * 40)
    for name, value in config.model_dump().items():
        click.echo(f"  {name}: {value}")


# =============================================================================
# Demo Command
# =============================================================================


def _report(step: str, error) -> bool:
    if error is None:
        click.echo(f"  ✓ {step}")
        return True
    click.echo(f"  ✗ {step}: {error}")
    return False


def _new_protocol(ctx):
    from huddle.core.protocol import HuddleProtocol
    from huddle.services import InMemoryCurrency, ManualClock

    clock = ManualClock(START_TIME)
    currency = InMemoryCurrency([("host", 0), ("alice", 1000), ("bob", 1000), ("carol", 1000)])
    protocol = HuddleProtocol(config=ctx.obj["config"], currency=currency, clock=clock)

    _, err = protocol.bind("host", "@host", "https://twitter.com/host/status/1509563457811017729")
    _report("host bound to @host", err)
    return protocol, clock, currency


def _run_auction(protocol, clock, currency):
    huddle_id, err = protocol.create_huddle("host", START_TIME + HOUR, 100)
    _report(f"huddle {huddle_id} created: floor=100, live in 1h", err)

    _, err = protocol.place_bid("alice", huddle_id, 150)
    _report("alice bids 150", err)
    _, err = protocol.place_bid("bob", huddle_id, 120)
    _report("bob bids 120", err)
    _, err = protocol.place_bid("bob", huddle_id, 200)
    _report("bob bids 200", err)
    click.echo(f"    alice reserved: {currency.reserved_balance('alice')}, bob reserved: {currency.reserved_balance('bob')}")

    clock.advance(HOUR)
    huddle, err = protocol.finalize(huddle_id)
    _report(f"huddle {huddle_id} finalized", err)

    value, err = protocol.claim("host", huddle_id)
    _report(f"host claims {value}", err)
    _, err = protocol.claim("host", huddle_id)
    _report("host claims again", err)
    click.echo(f"    host balance: {currency.free_balance('host')}")
    return huddle_id


@cli.command("demo")
@click.option(
    "--scenario",
    type=click.Choice(["auction", "guest", "reputation"]),
    default="auction",
    help="Demo scenario to run",
)
@click.pass_context
def demo(ctx, scenario):
    """Run a scenario on in-memory collaborators"""
    click.echo("=" * 60)
    click.echo(f"  HUDDLE - {scenario.upper()} DEMO")
    click.echo("=" * 60)

    protocol, clock, currency = _new_protocol(ctx)

    if scenario == "auction":
        _run_auction(protocol, clock, currency)

    elif scenario == "guest":
        huddle_id, err = protocol.open_huddle_for_host("alice", "host", 40)
        _report(f"alice proposes huddle {huddle_id} for host: floor=40", err)
        _, err = protocol.place_bid("carol", huddle_id, 50)
        _report("carol bids 50 before acceptance", err)
        huddle, err = protocol.accept_huddle("host", huddle_id, START_TIME + 2 * HOUR)
        _report("host accepts, live in 2h", err)
        if huddle:
            winning = protocol.bids.winning_bid(huddle_id)
            click.echo(f"    status: {huddle.status.name}, winning bid: {winning.value if winning else None}")

    elif scenario == "reputation":
        huddle_id = _run_auction(protocol, clock, currency)
        _, err = protocol.rate("host", huddle_id, "bob", 5)
        _report("host rates bob 5 stars", err)
        _, err = protocol.rate("bob", huddle_id, "host", 4)
        _report("bob rates host 4 stars", err)
        _, err = protocol.rate("host", huddle_id, "bob", 3)
        _report("host rates bob again", err)
        _, err = protocol.rate("carol", huddle_id, "host", 1)
        _report("carol rates host", err)
        for account in ("host", "bob", "carol"):
            score = protocol.get_score(account)
            shown = f"{score.average:.2f} ({score.rating_count})" if score.is_rated else "unrated"
            click.echo(f"    {account}: {shown}")

    click.echo()
    click.echo(f"📊 {protocol.stats()}")


if __name__ == "__main__":
    cli()
