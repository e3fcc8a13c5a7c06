"""
Selal - CLI Entry Point.

Usage:
    selal quote 50 100 --plan annual    Price a fleet
    selal register                      Walk through the sign-up wizard
    selal health                        Check configuration
    selal serve                         Start the web API
"""

import os

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from selal.logging_setup import configure_logging

app = typer.Typer(
    name="selal",
    help="Selal - fish supply chain platform.",
    add_completion=False,
)
console = Console()


class _GoBack(Exception):
    """User typed 'back' at a prompt."""


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    from selal.config import settings

    configure_logging("DEBUG" if verbose else settings.log_level)


def _quote_table(quote, currency: str) -> Table:
    from registration.pricing import BillingCycle, discount_label, format_amount

    table = Table(title="Subscription Plans")
    table.add_column("Plan")
    table.add_column("Discount")
    table.add_column("Cost", justify="right")
    table.add_column("Period")

    periods = {
        BillingCycle.MONTHLY: "per month",
        BillingCycle.QUARTERLY: "3 months",
        BillingCycle.ANNUAL: "per year",
    }
    for cycle in BillingCycle:
        marker = " *" if cycle == quote.plan else ""
        table.add_row(
            f"{cycle.value.title()}{marker}",
            discount_label(cycle) or "-",
            format_amount(quote.plan_costs[cycle], currency),
            periods[cycle],
        )
    return table


def _print_quote(quote) -> None:
    from selal.config import settings
    from registration.pricing import format_amount

    console.print(_quote_table(quote, settings.currency))
    console.print(f"Total Fleet Capacity: [bold]{quote.total_capacity}[/bold] boxes")
    console.print(f"Base Monthly Rate: {format_amount(quote.monthly_base_cost, settings.currency)}")
    console.print(f"[bold]Total Cost:[/bold] {format_amount(quote.total, settings.currency)}")


@app.command()
def quote(
    capacities: list[int] = typer.Argument(..., help="Capacity of each boat, in boxes"),
    plan: str = typer.Option("monthly", "--plan", "-p", help="monthly, quarterly or annual"),
) -> None:
    """Price a fleet for each billing cycle."""
    from registration.pricing import BillingCycle, calculate_pricing

    try:
        cycle = BillingCycle(plan)
    except ValueError:
        console.print(f"[red]Unknown plan: {plan}[/red]")
        raise typer.Exit(1)

    _print_quote(calculate_pricing([{"capacity": c} for c in capacities], cycle))


# =============================================================================
# Interactive registration
# =============================================================================


def _ask(label: str, default: str = "") -> str:
    suffix = f" [dim]({default})[/dim]" if default else ""
    answer = console.input(f"[bold blue]{label}[/bold blue]{suffix}: ").strip()
    if answer.lower() == "back":
        raise _GoBack()
    return answer or default


def _collect_user_type(wizard) -> dict:
    from registration.forms import USER_TYPES

    for i, option in enumerate(USER_TYPES, 1):
        console.print(f"  {i}. {option['label']} - [dim]{option['description']}[/dim]")
    previous = (wizard.draft.get("user_type") or {}).get("user_type", "")
    choice = _ask("Account type (number or name)", previous)
    if choice.isdigit() and 1 <= int(choice) <= len(USER_TYPES):
        choice = USER_TYPES[int(choice) - 1]["value"]
    return {"user_type": choice}


def _collect_personal_info(wizard) -> dict:
    previous = wizard.draft.get("personal_info") or {}
    return {
        "full_name": _ask("Full name", previous.get("full_name", "")),
        "phone": _ask("Phone (01XXXXXXXXX)", previous.get("phone", "")),
        "national_id": _ask("National ID", previous.get("national_id", "")),
        "company_name": _ask("Company / boat owner name", previous.get("company_name", "")),
        "agree_terms": _ask("Agree to terms? (y/n)", "y").lower().startswith("y"),
    }


def _collect_subscription(wizard) -> dict:
    editor = wizard.fleet_editor()
    editor.set_number_of_boats(int(_ask("Number of boats (1-10)", str(editor.number_of_boats))))
    for i, boat in enumerate(list(editor.boats)):
        console.print(f"\n[bold]Boat {i + 1} Details[/bold]")
        editor.update_boat(
            i,
            name=_ask("  Boat name", boat["name"]),
            registration_number=_ask("  Registration number", boat["registration_number"]),
            capacity=int(_ask("  Capacity (boxes)", str(boat["capacity"]))),
            box_size=_ask("  Box size (20kg/25kg)", boat["box_size"]),
        )
    editor.set_plan(_ask("Billing cycle (monthly/quarterly/annual)", editor.plan.value))
    for hint in editor.hints():
        console.print(f"[yellow]{hint}[/yellow]")
    _print_quote(editor.quote)
    return editor.to_payload()


def _collect_payment(wizard) -> dict:
    from selal.config import settings
    from registration.pricing import format_amount

    summary = wizard.payment_summary()
    if summary.subscription_plan:
        console.print(
            Panel.fit(
                f"Plan: {summary.subscription_plan}\n"
                f"Boats: {summary.total_boats}\n"
                f"Capacity: {summary.total_capacity} boxes\n"
                f"Total: {format_amount(summary.total_amount, settings.currency)}",
                title="Order Summary",
            )
        )
    previous = wizard.draft.get("payment") or {}
    return {
        "payment_method": _ask("Payment method (bank/cash/instapay)", previous.get("payment_method", "bank")),
        "payment_reference": _ask("Payment reference", previous.get("payment_reference") or "") or None,
        "payment_date": _ask("Payment date (YYYY-MM-DD)", previous.get("payment_date", "")),
    }


@app.command()
def register() -> None:
    """Walk through the registration wizard. Type 'back' at any prompt to go back."""
    from registration import RegistrationWizard, StepId
    from registration.payload import success_message
    from selal.repositories import InMemoryRegistrationRepository

    collectors = {
        StepId.USER_TYPE: _collect_user_type,
        StepId.PERSONAL_INFO: _collect_personal_info,
        StepId.SUBSCRIPTION_REQUIREMENTS: _collect_subscription,
        StepId.PAYMENT: _collect_payment,
    }

    wizard = RegistrationWizard(repository=InMemoryRegistrationRepository())
    console.print(Panel.fit("[bold green]Selal Registration[/bold green]", border_style="green"))

    try:
        while wizard.current != StepId.SUCCESS:
            step = wizard.current
            position = wizard.sequencer.current_step + 1
            console.print(f"\n[bold]Step {position}/{len(wizard.sequencer.steps)}: {step.value.replace('_', ' ').title()}[/bold]")

            try:
                outcome = wizard.submit(collectors[step](wizard))
                while outcome.otp_required:
                    outcome = wizard.verify_otp(_ask("Enter the 6-digit code sent to your phone"))
                    for error in outcome.errors.values():
                        console.print(f"[red]{error}[/red]")
            except _GoBack:
                wizard.back()
                continue
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
                continue

            for field_path, error in outcome.errors.items():
                console.print(f"[red]{field_path}: {error}[/red]")

    except KeyboardInterrupt:
        wizard.abandon()
        console.print("\n\n[dim]Registration abandoned.[/dim]")
        raise typer.Exit(1)

    account_type = wizard.sequencer.account_type.value if wizard.sequencer.account_type else None
    console.print(
        Panel.fit(
            f"[bold green]Registration Successful![/bold green]\n{success_message(account_type)}\n\n"
            f"[dim]Reference: {wizard.reference}[/dim]",
            border_style="green",
        )
    )


@app.command()
def health() -> None:
    """Check configuration."""
    from selal.config import get_settings

    console.print("\n[bold]Selal Health Check[/bold]\n")

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        raise typer.Exit(1)

    console.print("[green]OK[/green] Configuration loaded")
    console.print(f"   Environment: {settings.selal_env}")
    console.print(f"   Log level: {settings.log_level}")
    console.print(f"   Locale: {settings.default_locale}")
    if settings.otp_mocked:
        console.print("[yellow]WARN[/yellow] OTP verification is mocked")
    console.print("\n[green]All checks passed![/green]")


@app.command()
def version() -> None:
    """Show version information."""
    from selal import __version__

    console.print(f"Selal version {__version__}")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web API server."""
    import uvicorn

    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Selal API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "selal.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
