#!/usr/bin/env python3
"""Command Line Interface for the pharmacy sales assistant.

Usage:
    pharmacy-assistant server          # Start API server
    pharmacy-assistant info            # Show configuration
    pharmacy-assistant pharmacies      # List the pharmacy directory
    pharmacy-assistant chat PHONE      # Talk to the assistant from the console
"""
from __future__ import annotations

import json
from typing import Optional

import typer
import uvicorn

from pharmacy_assistant.core.config import get_settings
from pharmacy_assistant.core.logging_config import get_logger, setup_logging
from pharmacy_assistant.core.results import ChatResult

LOGGER = get_logger(__name__)
SETTINGS = get_settings()

app = typer.Typer(help="Pharmacy sales assistant CLI")

CHAT_HELP = "Commands: /callback TIME, /email, /state, /quit"


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
) -> None:
    """Pharmacy sales assistant - inbound call handling for high-volume pharmacies."""
    log_level = "DEBUG" if verbose else SETTINGS.log_level
    setup_logging(level=log_level, json_format=SETTINGS.log_format == "json")


def _echo_result(result: ChatResult) -> None:
    if result.success:
        if result.message:
            typer.secho(f"Assistant: {result.message}", fg="green")
    else:
        typer.secho(f"✗ {result.message} ({result.status.value})", fg="red")


@app.command("server")
def run_server(
    host: Optional[str] = typer.Option(None, help="Host to bind to (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port to bind to (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
) -> None:
    """Start the API server."""
    host = host or SETTINGS.api_host
    port = port or SETTINGS.api_port
    typer.echo(f"Starting API server on {host}:{port}...")
    uvicorn.run("pharmacy_assistant.api.app:app", host=host, port=port, reload=reload)


@app.command("pharmacies")
def list_pharmacies() -> None:
    """List every pharmacy in the directory with its derived monthly volume."""
    from pharmacy_assistant.services.orchestrator import build_orchestrator

    result = build_orchestrator().list_pharmacies()
    if not result.success:
        _echo_result(result)
        raise typer.Exit(code=1)

    pharmacies = result.data["pharmacies"]
    typer.echo(f"{len(pharmacies)} pharmacies:")
    for pharmacy in pharmacies:
        typer.echo(
            f"  {pharmacy['name']} | {pharmacy['phone']} | "
            f"{pharmacy['address'] or 'location unknown'} | {pharmacy['rxVolume']:,} Rx/month"
        )


@app.command("chat")
def chat(
    phone: str = typer.Argument(..., help="Caller phone number"),
) -> None:
    """Start a conversation as the given caller and chat from the console."""
    from pharmacy_assistant.services.orchestrator import build_orchestrator

    orchestrator = build_orchestrator()
    result = orchestrator.start(phone)
    _echo_result(result)
    if not result.success:
        raise typer.Exit(code=1)
    typer.echo(CHAT_HELP)

    while True:
        text = typer.prompt("You").strip()
        if not text:
            continue
        if text == "/quit":
            break
        if text == "/state":
            context = orchestrator.get_conversation(phone).data.get("context")
            typer.echo(json.dumps(context, indent=2))
        elif text == "/email":
            _echo_result(orchestrator.send_follow_up_email(phone))
        elif text.startswith("/callback"):
            preferred_time = text[len("/callback"):].strip()
            if not preferred_time:
                typer.echo("Usage: /callback TIME")
                continue
            _echo_result(orchestrator.schedule_callback(phone, preferred_time))
        elif text.startswith("/"):
            typer.echo(CHAT_HELP)
        else:
            _echo_result(orchestrator.message(phone, text))


@app.command("info")
def show_info() -> None:
    """Show current configuration."""
    typer.echo("Pharmacy Sales Assistant Configuration:")
    typer.echo(f"  Environment: {SETTINGS.environment}")
    typer.echo(f"  Company: {SETTINGS.company_name}")
    typer.echo(f"  Log Level: {SETTINGS.log_level}")
    typer.echo(f"  Pharmacy API: {SETTINGS.pharmacy_api_url}")
    typer.echo(f"  OpenAI Configured: {SETTINGS.is_openai_enabled()}")
    typer.echo(f"  Anthropic Configured: {SETTINGS.is_anthropic_enabled()}")
    typer.echo(f"  Product FAQ: {SETTINGS.enable_product_faq}")
    typer.echo(f"  Enabled Services: {', '.join(SETTINGS.get_enabled_services())}")


if __name__ == "__main__":
    app()
