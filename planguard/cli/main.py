"""Main CLI entry point for PlanGuard commands."""
import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional

import click

from planguard import __version__
from planguard.core.billing import cooldown
from planguard.core.billing.entitlements import FEATURE_MATRIX, has_feature, resolve_features
from planguard.core.billing.invoices import InvoiceArchive, InvoiceArtifact
from planguard.core.config import settings
from planguard.core.logging import configure_logging
from planguard.enums import InvoiceFormat
from planguard.exceptions import ApiClientError, InvalidTierError
from planguard.services.api_client import DashboardApiClient


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this run.")
def cli(log_level: Optional[str]) -> None:
    """PlanGuard - entitlement and usage governance CLI."""
    configure_logging(log_level)


@cli.command()
@click.argument("tier")
@click.option("--addon", is_flag=True, help="Include the 24x7 support add-on.")
def plan(tier: str, addon: bool) -> None:
    """Show the entitlements of a plan tier."""
    try:
        features = resolve_features(tier, addon)
    except InvalidTierError as e:
        raise click.BadParameter(e.error_code.message, param_hint="TIER") from e

    limit = "Unlimited" if features.is_unlimited else str(features.request_limit)
    click.echo(click.style(f"{features.name} plan  {features.price_display}/mo", fg="green", bold=True))
    click.echo(f"  Requests:           {limit}")
    click.echo(f"  Response (business): {features.response_time_business}")
    click.echo(f"  Response (off-hours): {features.response_time_off_hours}")
    click.echo(f"  Channels:           {', '.join(features.channels)}")
    click.echo(f"  AI capability:      {features.ai_capability}")
    click.echo(f"  Priority:           {features.priority_tier.value}")
    click.echo(f"  Dev credit hours:   {features.free_dev_credit_hours}")
    click.echo()
    for feature in FEATURE_MATRIX:
        mark = click.style("✓", fg="green") if has_feature(features.id, addon, feature) else click.style("✗", fg="red")
        click.echo(f"  {mark} {feature}")


def _parse_instant(value: str, param_hint: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise click.BadParameter(f"Not an ISO-8601 instant: {value}", param_hint=param_hint) from e


@cli.command(name="cooldown")
@click.argument("next_eligible_at")
@click.option("--now", "now_value", default=None, help="Evaluate at this ISO-8601 instant instead of the clock.")
def cooldown_command(next_eligible_at: str, now_value: Optional[str]) -> None:
    """Show the time left before the next support ticket may be filed."""
    expiry = _parse_instant(next_eligible_at, "NEXT_ELIGIBLE_AT")
    now = _parse_instant(now_value, "--now") if now_value else cooldown.utcnow()

    display = cooldown.format_countdown(now, expiry)
    if display is None:
        click.echo(click.style("Ready: no active cooldown", fg="green"))
    else:
        click.echo(click.style(f"On cooldown ({display})", fg="yellow"))


async def _render_invoice(
    invoice_number: str,
    customer_name: str,
    customer_email: Optional[str],
    fmt: InvoiceFormat,
) -> Optional[InvoiceArtifact]:
    archive = InvoiceArchive(issuer=settings.invoice_issuer_name)
    async with DashboardApiClient() as client:
        archive.replace(await client.fetch_invoices())

    invoice = archive.find(invoice_number)
    if invoice is None:
        return None
    return archive.render(invoice, customer_name, customer_email, fmt=fmt)


@cli.command()
@click.argument("invoice_number")
@click.option("--name", "customer_name", required=True, help="Payer name printed on the invoice.")
@click.option("--email", "customer_email", default=None, help="Payer email printed on the invoice.")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in InvoiceFormat]),
    default=settings.invoice_default_format,
    show_default=True,
)
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
)
def invoice(invoice_number: str, customer_name: str, customer_email: Optional[str], fmt: str, out_dir: Path) -> None:
    """Download one invoice from the billing history."""
    try:
        artifact = asyncio.run(
            _render_invoice(invoice_number, customer_name, customer_email, InvoiceFormat(fmt))
        )
    except ApiClientError as e:
        raise click.ClickException(f"Could not load billing history: {e}") from e

    if artifact is None:
        raise click.ClickException(f"Invoice {invoice_number} not found")

    path = InvoiceArchive.download(artifact, out_dir)
    click.echo(click.style(f"✓ Saved {path}", fg="green"))


if __name__ == "__main__":
    cli()
