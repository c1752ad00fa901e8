from __future__ import annotations

import json
import sys
from typing import Any, Optional

import typer

from text_unpacker.core.errors import PackError, PackLoadError, PackValidationError
from text_unpacker.core.expand.expand_packed import expand_packed
from text_unpacker.core.io.load_batch import load_batch
from text_unpacker.core.logging_setup import configure_logging
from text_unpacker.core.settings import OUTPUT_FORMATS, SettingsError, UnpackSettings, load_and_merge
from text_unpacker.core.validate.validate_packed import summarize_packed, validate_packed

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging on stderr"),
    log_json: bool = typer.Option(False, "--log-json", help="Emit log records as JSON lines"),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        envvar="UNPACKER_CONFIG",
        help="Optional YAML file with prompt/format/quit_word settings",
    ),
) -> None:
    """Unpacker CLI: validate and expand run-length packed text."""
    configure_logging(verbose=verbose, log_json=log_json)

    try:
        settings = load_and_merge(config)
    except FileNotFoundError:
        _print_errors(
            [
                PackLoadError(
                    code="E_SETTINGS_FILE_NOT_FOUND",
                    message=f"settings file not found: {config}",
                    source="config",
                )
            ]
        )
        raise typer.Exit(code=1)
    except SettingsError as e:
        _print_errors(
            [
                PackValidationError(
                    code="E_SETTINGS_FILE_INVALID",
                    message=str(e),
                    source=config,
                )
            ]
        )
        raise typer.Exit(code=2)

    ctx.obj = settings


@app.command("validate")
def validate(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Packed text, e.g. a3[bc]4[d]e"),
    format: Optional[str] = typer.Option(None, "--format", help="Output format: text|json"),
) -> None:
    """Check whether a packed text can be unpacked."""
    fmt = _resolve_format(ctx, format, command="validate")

    result = validate_packed(text)
    errors: list[PackError] = [result.error] if result.error is not None else []

    if fmt == "json":
        summary = _summary(text) if result.is_valid else None
        _emit_json("validate", result.is_valid, errors=errors, summary=summary)

    if errors:
        _print_errors(errors)
        raise typer.Exit(code=2)
    typer.echo("OK: valid")


@app.command("expand")
def expand(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Packed text, e.g. a3[bc]4[d]e"),
    format: Optional[str] = typer.Option(None, "--format", help="Output format: text|json"),
) -> None:
    """Validate a packed text and print its expansion."""
    fmt = _resolve_format(ctx, format, command="expand")

    result = validate_packed(text)
    if result.error is not None:
        if fmt == "json":
            _emit_json("expand", False, errors=[result.error], summary=None)
        _print_errors([result.error])
        raise typer.Exit(code=2)

    expanded = expand_packed(text)
    if fmt == "json":
        summary = _summary(text)
        summary["output_length"] = len(expanded)
        summary["output"] = expanded
        _emit_json("expand", True, errors=[], summary=summary)

    typer.echo(expanded)


@app.command("batch")
def batch(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to a batch file (.yaml/.yml/.json)"),
    format: Optional[str] = typer.Option(None, "--format", help="Output format: text|json"),
) -> None:
    """Validate and expand every packed text listed in a file."""
    fmt = _resolve_format(ctx, format, command="batch")

    try:
        entries = load_batch(path)
    except PackLoadError as e:
        if fmt == "json":
            _emit_json("batch", False, errors=[e], summary=None, exit_code=1)
        _print_errors([e])
        raise typer.Exit(code=1)

    errors: list[PackError] = []
    results: list[dict[str, Any]] = []
    for i, text in enumerate(entries):
        result = validate_packed(text, source=f"{path}#{i}")
        if result.error is not None:
            errors.append(result.error)
            results.append({"input": text, "ok": False, "output": None})
            continue
        results.append({"input": text, "ok": True, "output": expand_packed(text)})

    if fmt == "json":
        summary = {
            "entry_count": len(entries),
            "valid_count": len(entries) - len(errors),
            "results": results,
        }
        _emit_json("batch", not errors, errors=errors, summary=summary)

    for item in results:
        if item["ok"]:
            typer.echo(f"{item['input']} -> {item['output']}")
    if errors:
        _print_errors(errors)
        raise typer.Exit(code=2)
    typer.echo(f"OK: {len(entries)} entries unpacked")


@app.command("repl")
def repl(ctx: typer.Context) -> None:
    """Interactive loop: read a line, print its expansion or the reason it is invalid.

    Stops at end of input, or on the configured quit word.
    """
    settings: UnpackSettings = ctx.obj or UnpackSettings()

    while True:
        typer.echo(settings.prompt)
        line = sys.stdin.readline()
        if not line:
            return
        packed = line.rstrip("\r\n")
        if settings.quit_word is not None and packed.strip() == settings.quit_word:
            return

        result = validate_packed(packed)
        if result.is_valid:
            typer.echo(f"Unpacked: {expand_packed(packed)}")
        else:
            typer.echo(f"The provided text is not valid for unpacking. Details:\n{result.message}")
        typer.echo("")


def _resolve_format(ctx: typer.Context, format: Optional[str], *, command: str) -> str:
    settings: UnpackSettings = ctx.obj or UnpackSettings()
    fmt = format or settings.format
    if fmt not in OUTPUT_FORMATS:
        _print_errors(
            [
                PackValidationError(
                    code="E_UNKNOWN_FORMAT",
                    message=f"unknown format: {fmt} (choose one of: {', '.join(OUTPUT_FORMATS)})",
                    source=command,
                )
            ]
        )
        raise typer.Exit(code=2)
    return fmt


def _summary(text: str) -> dict[str, Any]:
    s = summarize_packed(text)
    return {
        "group_count": s.group_count,
        "max_depth": s.max_depth,
        "input_length": s.input_length,
    }


def _to_item(e: PackError) -> dict[str, Any]:
    stage = "load" if isinstance(e, PackLoadError) else "validate"
    return {
        "code": e.code,
        "message": e.message,
        "source": e.source,
        "position": e.position,
        "severity": "error",
        "stage": stage,
    }


def _emit_json(
    command: str,
    ok: bool,
    *,
    errors: list[PackError],
    summary: dict[str, Any] | None,
    exit_code: int | None = None,
) -> None:
    payload = {
        "tool": "unpacker",
        "command": command,
        "ok": ok,
        "error_count": len(errors),
        "errors": [_to_item(e) for e in errors],
        "summary": summary,
    }
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    if exit_code is None:
        exit_code = 0 if ok else 2
    raise typer.Exit(code=exit_code)


def _print_errors(errors: list[PackError]) -> None:
    errors_sorted = sorted(
        errors, key=lambda e: (e.source or "", -1 if e.position is None else e.position, e.code)
    )
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="unpacker")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
