from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from voicerouter.core.assemble import normalize_response
from voicerouter.core.providers import is_supported, list_providers
from voicerouter.core.webhooks import create_webhook_router
from voicerouter.utils.io import read_json, write_json

app = typer.Typer(help="Normalize speech-to-text provider payloads into one transcript schema")


def _load(path: Path) -> Any:
    try:
        return read_json(path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise typer.BadParameter(f"cannot read JSON from {path}: {e}")


def _parse_query(pairs: Optional[List[str]]) -> Optional[Dict[str, str]]:
    if not pairs:
        return None
    out: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"query must look like key=value, got {pair!r}")
        out[key] = value
    return out


def _emit(model: Any, out: Optional[Path]) -> None:
    if out is not None:
        write_json(out, model.model_dump(mode="json"))
        return
    typer.echo(model.model_dump_json(indent=2))


@app.command()
def normalize(
    input: Path = typer.Argument(..., exists=True, dir_okay=False, help="Provider payload (JSON file)"),
    provider: str = typer.Option(..., "--provider", "-p", help="Provider tag, e.g. gladia / deepgram / azure-stt"),
    http_status: Optional[int] = typer.Option(None, help="HTTP status of the provider call"),
    failed: bool = typer.Option(False, "--failed", help="Treat the payload as the body of a rejected call"),
    out: Optional[Path] = typer.Option(None, help="Write the result here instead of stdout"),
):
    """Map one provider payload to the unified transcript response."""
    if not is_supported(provider):
        raise typer.BadParameter(f"provider must be one of: {', '.join(list_providers())}")
    result = normalize_response(provider, _load(input), success=not failed, http_status=http_status)
    _emit(result, out)


@app.command()
def webhook(
    input: Path = typer.Argument(..., exists=True, dir_okay=False, help="Webhook body (JSON file)"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Skip detection and use this handler"),
    query: Optional[List[str]] = typer.Option(None, "--query", "-q", help="Query parameter key=value (repeatable)"),
    user_agent: Optional[str] = typer.Option(None, help="User-Agent header of the delivery"),
    out: Optional[Path] = typer.Option(None, help="Write the result here instead of stdout"),
):
    """Detect the sender of a webhook body and normalize it."""
    router = create_webhook_router()
    if provider is not None and router.get_handler(provider) is None:
        raise typer.BadParameter(f"provider must be one of: {', '.join(router.providers())}")
    result = router.route(
        _load(input),
        provider=provider,
        query_params=_parse_query(query),
        user_agent=user_agent,
    )
    _emit(result, out)
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def providers():
    """List supported provider tags."""
    webhook_providers = set(create_webhook_router().providers())
    for name in list_providers():
        suffix = " (webhooks)" if name in webhook_providers else ""
        typer.echo(f"{name}{suffix}")


if __name__ == "__main__":
    app()
