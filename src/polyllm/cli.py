"""CLI interface for polyllm"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import yaml

from polyllm.application.llm_service import LLMService
from polyllm.domain.config import (
    Config,
    ConfigOption,
    apply_options,
    set_max_tokens,
    set_model,
    set_provider,
    set_seed,
    set_temperature,
)
from polyllm.infrastructure.config.config_manager import ConfigurationError, load_config
from polyllm.infrastructure.llm.factory import ProviderFactory

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _cli_options(
    provider: Optional[str],
    model: Optional[str],
    temperature: Optional[float],
    max_tokens: Optional[int],
    seed: Optional[int],
) -> List[ConfigOption]:
    """Turn CLI flags into configurators"""
    options: List[ConfigOption] = []
    if provider:
        options.append(set_provider(provider.lower()))
    if model:
        options.append(set_model(model))
    if temperature is not None:
        options.append(set_temperature(temperature))
    if max_tokens is not None:
        options.append(set_max_tokens(max_tokens))
    if seed is not None:
        options.append(set_seed(seed))
    return options


def _build_config(ctx: click.Context, options: List[ConfigOption]) -> Config:
    """Load configuration and apply CLI overrides"""
    verbose = ctx.obj.get("verbose", False)
    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)
    return apply_options(config, *options)


def _create_service(ctx: click.Context, options: List[ConfigOption]) -> LLMService:
    verbose = ctx.obj.get("verbose", False)
    config = _build_config(ctx, options)
    logger.info(f"Using LLM provider: {config.provider}")
    try:
        return LLMService(config)
    except ValueError as e:
        _die(str(e), verbose=verbose, exc=e)


def _load_schema(schema_path: Optional[Path]) -> Optional[Dict[str, Any]]:
    """Read a JSON schema file"""
    if schema_path is None:
        return None
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON schema in {schema_path}: {e}") from e


def _schema_options(schema_path: Optional[Path], strict: bool) -> Dict[str, Any]:
    """Request options for --strict; only sent when the flag is given"""
    if strict and schema_path is None:
        raise click.UsageError("--strict requires --schema")
    return {"strict": True} if strict else {}


def _request_options(func):
    """Shared flags for commands that build a request"""
    decorators = [
        click.option(
            "--provider",
            type=str,
            help=f"LLM provider to use ({', '.join(ProviderFactory.available())}). Overrides config.",
        ),
        click.option("--model", type=str, help="Model identifier. Overrides config."),
        click.option("--temperature", type=float, help="Sampling temperature. Overrides config."),
        click.option("--max-tokens", type=int, help="Maximum tokens in response. Overrides config."),
        click.option("--seed", type=int, help="Random seed for deterministic sampling"),
        click.option(
            "--schema",
            "schema_path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="JSON schema file for structured output",
        ),
        click.option("--strict", is_flag=True, help="Ask for strict schema adherence"),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .polyllm.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """polyllm - unified access to LLM chat-completion APIs"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("prompt", type=str)
@_request_options
@click.pass_context
def generate(
    ctx,
    prompt: str,
    provider: Optional[str],
    model: Optional[str],
    temperature: Optional[float],
    max_tokens: Optional[int],
    seed: Optional[int],
    schema_path: Optional[Path],
    strict: bool,
):
    """Send PROMPT to the provider and print the reply."""
    verbose = ctx.obj.get("verbose", False)
    options = _schema_options(schema_path, strict)
    service = _create_service(ctx, _cli_options(provider, model, temperature, max_tokens, seed))
    schema = _load_schema(schema_path)

    try:
        if schema is None:
            reply = service.generate(prompt)
        else:
            reply = service.generate_with_schema(prompt, schema, **options)
    except click.ClickException:
        raise
    except Exception as e:
        _die(f"Generation failed: {e}", verbose=verbose, exc=e)

    click.echo(reply)


@cli.command()
@click.argument("prompt", type=str)
@_request_options
@click.pass_context
def request(
    ctx,
    prompt: str,
    provider: Optional[str],
    model: Optional[str],
    temperature: Optional[float],
    max_tokens: Optional[int],
    seed: Optional[int],
    schema_path: Optional[Path],
    strict: bool,
):
    """Print the HTTP request for PROMPT without sending it (dry run)."""
    verbose = ctx.obj.get("verbose", False)
    options = _schema_options(schema_path, strict)
    service = _create_service(ctx, _cli_options(provider, model, temperature, max_tokens, seed))
    schema = _load_schema(schema_path)

    try:
        prepared = service.build_request(prompt, schema=schema, **options)
    except Exception as e:
        _die(f"Failed to build request: {e}", verbose=verbose, exc=e)

    click.echo(f"POST {prepared.url}")
    for key, value in sorted(prepared.redacted_headers().items()):
        click.echo(f"{key}: {value}")
    click.echo("")
    click.echo(json.dumps(prepared.payload(), indent=2, ensure_ascii=False))


@cli.command(name="config")
@click.pass_context
def show_config(ctx):
    """Print the effective configuration (API key redacted)."""
    config = _build_config(ctx, [])
    data = config.model_dump(mode="json")
    if data.get("api_key"):
        data["api_key"] = "***"
    data["debug_level"] = config.debug_level.name
    click.echo(yaml.safe_dump(data, sort_keys=False).rstrip())


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
