import sys
import json
import click
import datetime
import logging
from .errors import format_error
from .logging import configure_logging
from .categories import CATEGORIES, get_category, load_categories
from .config import get_display_timezone
from .news import fetch_category_news, get_dashboard_news
from .stats import get_market_stats
from .export.paths import get_export_dir
from .export import json_export, md_export, clipboard
from .digest.summary import build_summary_prompt
from .providers import gemini

# Configure logging at module level
configure_logging()
logger = logging.getLogger(__name__)

__version__ = "0.1.0"


def _dump_news(news):
    return {key: [i.model_dump(mode="json", by_alias=True) for i in items] for key, items in news.items()}


def _snapshot(force):
    """News bundle and market stats from one refresh cycle."""
    now = datetime.datetime.now(datetime.timezone.utc)
    logger.info(f"Refreshing dashboard (force={force})")
    news = get_dashboard_news(force_refresh=force, now=now)
    stats = get_market_stats(force_refresh=force)
    return now, news, stats


def _local_timestamp(now):
    return now.astimezone(get_display_timezone()).strftime("%Y/%m/%d %H:%M:%S")


@click.group()
def cli():
    """coldnews: Financial news and market sentiment dashboard."""
    pass


@cli.command()
def version():
    """Print version information."""
    _print_json({"version": __version__})


@cli.command()
@click.option("--category", "category_key", required=False, help=f"Single category ({', '.join(CATEGORIES)})")
@click.option("--categories", "categories_file", required=False, help="YAML file overriding the category table")
@click.option("--force", is_flag=True, help="Bypass transport caches")
def news(category_key, categories_file, force):
    """Fetch the last 24 hours of news per category."""
    table = load_categories(categories_file) if categories_file else CATEGORIES

    if category_key:
        config = get_category(category_key, table)
        items = fetch_category_news(config, force_refresh=force)
        _print_json({config.key: [i.model_dump(mode="json", by_alias=True) for i in items]})
        return

    bundle = get_dashboard_news(table, force_refresh=force)
    _print_json(_dump_news(bundle))


@cli.command()
@click.option("--force", is_flag=True, help="Bypass transport caches")
def stats(force):
    """Fetch market indicators (fallback constants for unavailable sources)."""
    data = get_market_stats(force_refresh=force)
    _print_json(data.model_dump(mode="json", by_alias=True))


@cli.command()
@click.option("--out", default="./exports", help="Export root directory")
@click.option("--force", is_flag=True, help="Bypass transport caches")
def dashboard(out, force):
    """
    Refresh news and market stats, then write dashboard.json and dashboard.md.
    """
    now, bundle, market = _snapshot(force)
    export_dir = get_export_dir(root=out, day=now.astimezone(get_display_timezone()).date())

    payload = {
        "updated_at": now.isoformat(),
        "news": _dump_news(bundle),
        "stats": market.model_dump(mode="json", by_alias=True),
    }
    json_export.export_json(payload, export_dir / "dashboard.json")
    md_export.export_dashboard_md(
        bundle, market, export_dir / "dashboard.md", generated_at=_local_timestamp(now)
    )

    _print_json({
        "directory": str(export_dir),
        "files": ["dashboard.json", "dashboard.md"],
        "counts": {key: len(items) for key, items in bundle.items()},
    })


@cli.command()
@click.option("--format", "fmt", type=click.Choice(["clipboard", "email", "md", "json"]), default="clipboard", show_default=True, help="Export format")
@click.option("--to", "recipient", default="", help="Recipient for --format email")
@click.option("--out", default="./exports", help="Export root directory (md/json)")
@click.option("--force", is_flag=True, help="Bypass transport caches")
def export(fmt, recipient, out, force):
    """
    Export the current news bundle as clipboard text, a mailto link, Markdown or JSON.
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    bundle = get_dashboard_news(force_refresh=force, now=now)

    if fmt == "clipboard":
        _print_json({"text": clipboard.format_news_for_clipboard(bundle)})
        return
    if fmt == "email":
        _print_json({
            "subject": clipboard.email_subject(now),
            "mailto": clipboard.build_mailto(bundle, to=recipient, now=now),
        })
        return

    export_dir = get_export_dir(root=out, day=now.astimezone(get_display_timezone()).date())
    if fmt == "md":
        path = export_dir / "news.md"
        md_export.export_dashboard_md(bundle, None, path, generated_at=_local_timestamp(now))
    else:
        path = export_dir / "news.json"
        json_export.export_json(_dump_news(bundle), path)
    _print_json({"file": str(path)})


@cli.command()
@click.option("--force", is_flag=True, help="Bypass transport caches")
@click.option("--prompt-only", is_flag=True, help="Print the prompt without calling the model")
def summary(force, prompt_only):
    """Generate an AI market summary from the current news and stats."""
    _, bundle, market = _snapshot(force)
    prompt = build_summary_prompt(bundle, market)
    if prompt_only:
        _print_json({"prompt": prompt})
        return
    _print_json({"summary": gemini.generate_summary(prompt)})


def _print_json(data):
    """Helper to print standard JSON envelope."""
    payload = {
        "ok": True,
        "data": data,
        "meta": {
            "version": 1,
            "generated_at": datetime.datetime.now(datetime.timezone.utc).isoformat()
        }
    }
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def main():
    """Entry point for the CLI."""
    try:
        cli(standalone_mode=False)
    except Exception as e:
        if isinstance(e, click.exceptions.Exit):
             sys.exit(e.exit_code)
        if isinstance(e, click.exceptions.Abort):
             sys.exit(130)

        print(format_error(e))
        sys.exit(1)

if __name__ == "__main__":
    main()
