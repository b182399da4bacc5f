"""memoryrank CLI - inspect temporal extraction and run recall over a memory file."""
import asyncio
import json

import click

from scitrera_app_framework import get_variables


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logs")
def cli(verbose: bool):
    """memoryrank - relevance engine for personal memory knowledge bases."""
    v = get_variables()  # logging level must be set before preconfigure() builds loggers
    if verbose:
        v.set("LOGGING_LEVEL", "DEBUG")


@cli.command()
def version():
    """Print the installed memoryrank version."""
    from memoryrank import __version__
    click.echo(f"memoryrank v{__version__}")


@cli.command()
@click.argument("text")
@click.option("--reference-date", default=None, help="ISO-8601 reference date (default: now, UTC)")
def temporal(text: str, reference_date: str):
    """Extract temporal information from TEXT and print it as JSON."""
    from memoryrank.services.temporal.default import PatternTemporalExtractorService
    from memoryrank.utils import parse_datetime_utc

    try:
        reference = parse_datetime_utc(reference_date)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--reference-date")

    extractor = PatternTemporalExtractorService(v=get_variables())
    info = extractor.extract(text, reference_date=reference)
    click.echo(info.model_dump_json(indent=2))


def load_memory_file(path: str) -> list[dict]:
    """Read a JSON array or NDJSON file of memory objects."""
    with open(path, 'r') as f:
        raw = f.read()

    try:
        parsed = json.loads(raw)
        items = parsed if isinstance(parsed, list) else [parsed]
    except json.JSONDecodeError:
        items = []
        for lineno, line in enumerate(raw.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                items.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise click.ClickException(f"{path}:{lineno}: invalid JSON ({e.msg})")

    for i, item in enumerate(items):
        if not isinstance(item, dict) or not str(item.get("content", "")).strip():
            raise click.ClickException(f"{path}: entry {i} has no 'content'")
    return items


async def _recall(items: list[dict], query: str, top_k: int):
    from memoryrank.dependencies import initialize_services, shutdown_services
    from memoryrank.services.memory import get_memory_service

    v = await initialize_services(get_variables())
    try:
        memory_service = get_memory_service(v)
        for item in items:
            await memory_service.remember(
                item["content"],
                is_static=bool(item.get("is_static", False)),
                confidence=float(item.get("confidence", 1.0)),
                container_tags=item.get("container_tags"),
            )
        return await memory_service.recall(query, top_k=top_k)
    finally:
        await shutdown_services(v)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("query")
@click.option("--top-k", default=10, type=click.IntRange(min=0), help="Number of results (default: 10)")
def recall(file: str, query: str, top_k: int):
    """Load memories from FILE (JSON or NDJSON) and recall the best matches for QUERY."""
    items = load_memory_file(file)
    if not items:
        click.echo("No memories loaded")
        return

    results = asyncio.run(_recall(items, query, top_k))
    for rank, result in enumerate(results, start=1):
        click.echo(f"{rank:>3}. [{result.score:.4f}] {result.memory.content}")


@cli.command()
@click.option("--format", "output_format", default="text", type=click.Choice(["text", "json"]))
def info(output_format: str):
    """Show the effective memoryrank configuration."""
    from memoryrank.dependencies import preconfigure

    v = get_variables()
    v.set("LOGGING_LEVEL", "ERROR")  # keep stdout clean for --format json
    v, _ = preconfigure(v)
    settings = {
        k.removeprefix('MEMORYRANK_'): val if isinstance(val, (str, int, float, bool)) or val is None else str(val)
        for (k, val) in sorted(v.export_all_variables().items(), key=lambda kv: kv[0])
        if k.startswith('MEMORYRANK')
    }

    if output_format == "json":
        click.echo(json.dumps(settings, indent=2))
    else:
        click.echo("memoryrank configuration")
        click.echo("=" * 40)
        for k, val in settings.items():
            click.echo(f"{k}: {val}")


if __name__ == "__main__":
    cli()
