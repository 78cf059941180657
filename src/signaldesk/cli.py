"""Signal Desk CLI."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import click

from .catalog import NEWSLETTER_TYPES, OUTPUT_TYPES, SOURCES, PillarDefinition, get_catalog
from .config import Settings, get_settings
from .errors import PersistenceError
from .insights import Insight, InsightStore
from .logging_config import add_error_log, setup_colored_logging


def _load_settings() -> Settings:
    try:
        settings = get_settings()
    except Exception as e:
        click.echo(f"Error loading settings: {e}", err=True)
        click.echo("Make sure .env file exists with OPENAI_API_KEY", err=True)
        sys.exit(1)

    try:
        add_error_log(settings.log_path)
    except OSError as e:
        click.echo(f"Warning: cannot write error log {settings.log_path}: {e}", err=True)
    return settings


def _content_pillar(pillar_id: str) -> PillarDefinition:
    pillar = get_catalog().get(pillar_id)
    if pillar is None or not pillar.is_content:
        valid = ", ".join(p.id.value for p in get_catalog().content_pillars())
        raise click.BadParameter(f"Unknown pillar '{pillar_id}'. Choose from: {valid}")
    return pillar


def _parse_answers(pillar: PillarDefinition, values: tuple[str, ...]) -> dict[str, str]:
    """Turn ``N=TEXT`` options into a question -> answer mapping."""
    answers = {}
    for value in values:
        number, sep, text = value.partition("=")
        if not sep or not number.strip().isdigit():
            raise click.BadParameter(f"Expected N=TEXT, got '{value}'", param_hint="--answer")
        index = int(number)
        if not 1 <= index <= len(pillar.questions):
            raise click.BadParameter(
                f"Question {index} out of range (1-{len(pillar.questions)})", param_hint="--answer"
            )
        answers[pillar.questions[index - 1]] = text.strip()
    return answers


def _save(store: InsightStore, insight: Insight) -> None:
    try:
        store.save(insight)
    except PersistenceError as e:
        click.echo(f"Warning: insight kept for this session but not saved to disk: {e}", err=True)
        sys.exit(1)
    click.echo(f"Saved insight {insight.id}")


def _echo_insight(insight: Insight) -> None:
    click.echo(f"{insight.id}  {insight.date:%Y-%m-%d}  [{insight.pillar_id.value}]  {insight.source}")
    signal = insight.signal if len(insight.signal) <= 80 else insight.signal[:80] + "..."
    click.echo(f"    {signal}")
    if insight.output_types:
        click.echo(f"    tags: {', '.join(insight.output_types)}")


def _write_or_echo(text: str, output: Optional[Path]) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"Wrote: {output}")
    else:
        click.echo(text)


def _emit_draft(workspace, output: Optional[Path], export: bool, settings: Settings) -> None:
    if export and not output:
        path = workspace.export(settings.exports_path / workspace.draft().filename)
        click.echo(f"Exported: {path}")
    else:
        _write_or_echo(workspace.draft().to_markdown(), output)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose):
    """Signal Desk - crypto market insight journal and newsletter drafting."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_colored_logging(verbose)


@cli.command()
def pillars():
    """List the topic pillars and their reflection questions."""
    for pillar in get_catalog().all():
        click.echo(f"{pillar.icon} {pillar.name} ({pillar.id.value})")
        for number, question in enumerate(pillar.questions, start=1):
            click.echo(f"    Q{number}: {question}")


@cli.command("insights")
@click.option("--pillar", "pillar_id", default=None, help="Only show insights for this pillar")
@click.option("--newsletter", is_flag=True, help="Only show insights tagged for newsletters")
def list_insights(pillar_id, newsletter):
    """List saved insights, newest first."""
    store = InsightStore.from_settings(_load_settings())

    if pillar_id:
        insights = store.by_pillar(_content_pillar(pillar_id).id)
    else:
        insights = store.insights
    if newsletter:
        insights = tuple(i for i in insights if i.is_newsletter_candidate)

    if not insights:
        click.echo("No insights saved yet.")
        return
    for insight in insights:
        _echo_insight(insight)


@cli.command()
@click.argument("pillar_id")
@click.option("--signal", required=True, help="Short summary of the market signal")
@click.option("--source", default=SOURCES[0], show_default=True, help="Where the signal came from")
@click.option("--answer", "answers", multiple=True, metavar="N=TEXT", help="Answer to question N")
@click.option("--narrative", required=True, help="Long-form interpretation")
@click.option(
    "--output-type", "output_types", multiple=True,
    help=f"Intended use, e.g. {', '.join(OUTPUT_TYPES)}",
)
def capture(pillar_id, signal, source, answers, narrative, output_types):
    """Save a manually written insight."""
    pillar = _content_pillar(pillar_id)
    if not signal.strip() or not narrative.strip():
        raise click.UsageError("An insight needs both a signal and a narrative")
    store = InsightStore.from_settings(_load_settings())

    insight = Insight.create(
        pillar,
        source=source,
        signal=signal,
        answers=_parse_answers(pillar, answers),
        narrative=narrative,
        output_types=list(output_types),
    )
    _save(store, insight)


@cli.command()
@click.argument("pillar_id")
@click.option("--source", default=SOURCES[0], show_default=True, help="Source to focus research on")
@click.option("--synthesize", is_flag=True, help="Rewrite the narrative from signal and reflections")
@click.option("--save", is_flag=True, help="Save the generated insight to the archive")
@click.option("--output-type", "output_types", multiple=True, help="Tags for the saved insight")
@click.pass_context
def fetch(ctx, pillar_id, source, synthesize, save, output_types):
    """Research a pillar and auto-generate an insight draft."""
    from .llm import OpenAIClient
    from .workspace import InsightWorkspace

    pillar = _content_pillar(pillar_id)
    settings = _load_settings()
    store = InsightStore.from_settings(settings)
    workspace = InsightWorkspace(pillar, OpenAIClient(settings), store)
    workspace.source = source

    async def run():
        if not await workspace.automate():
            return False
        if synthesize and not await workspace.synthesize():
            click.echo(workspace.synthesis_slot.notice, err=True)
        return True

    click.echo(f"Searching markets for {pillar.name}...", err=True)
    if not asyncio.run(run()):
        click.echo(workspace.automate_slot.notice, err=True)
        sys.exit(1)

    click.echo(f"SIGNAL: {workspace.signal}\n")
    for number, question in enumerate(pillar.questions, start=1):
        click.echo(f"Q{number}: {question}\n    {workspace.answers.get(question, '')}\n")
    click.echo(f"NARRATIVE: {workspace.narrative}")
    if workspace.sources:
        click.echo("\nSources:")
        for citation in workspace.sources:
            click.echo(f"  - {citation.title}: {citation.uri}")

    if save:
        for tag in output_types:
            workspace.toggle_output_type(tag)
        try:
            insight = workspace.save()
        except PersistenceError as e:
            click.echo(f"Warning: insight kept for this session but not saved to disk: {e}", err=True)
            sys.exit(1)
        click.echo(f"\nSaved insight {insight.id}")


@cli.group()
def newsletter():
    """Draft newsletter editions."""


@newsletter.command("auto")
@click.option(
    "--type", "newsletter_type", type=click.Choice(NEWSLETTER_TYPES),
    default=NEWSLETTER_TYPES[0], show_default=True, help="Campaign focus",
)
@click.option("--source", default=SOURCES[0], show_default=True, help="Source to focus research on")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Write markdown here")
@click.option("--export", is_flag=True, help="Save markdown under the data directory's exports folder")
def newsletter_auto(newsletter_type, source, output, export):
    """Research and write a complete edition."""
    from .llm import OpenAIClient
    from .workspace import NewsletterWorkspace

    settings = _load_settings()
    workspace = NewsletterWorkspace(OpenAIClient(settings), InsightStore.from_settings(settings))
    workspace.newsletter_type = newsletter_type
    workspace.target_source = source

    click.echo(f"Researching a '{newsletter_type}' edition...", err=True)
    if not asyncio.run(workspace.automate()):
        click.echo(workspace.automate_slot.notice, err=True)
        sys.exit(1)

    _emit_draft(workspace, output, export, settings)


@newsletter.command("draft")
@click.option("--insight", "insight_ids", multiple=True, help="Insight id to include (default: all tagged)")
@click.option("--title", default="", help="Subject line for the edition")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Write markdown here")
@click.option("--export", is_flag=True, help="Save markdown under the data directory's exports folder")
def newsletter_draft(insight_ids, title, output, export):
    """Synthesize an edition from insights tagged 'Newsletter'."""
    from .llm import OpenAIClient
    from .workspace import NewsletterWorkspace

    settings = _load_settings()
    workspace = NewsletterWorkspace(OpenAIClient(settings), InsightStore.from_settings(settings))

    candidates = workspace.candidates()
    if not candidates:
        click.echo("No insights have been tagged for 'Newsletter' yet.", err=True)
        sys.exit(1)

    for insight_id in insight_ids or [i.id for i in candidates]:
        workspace.toggle_insight(insight_id)
    if not workspace.selected_ids:
        click.echo("None of the given insights are tagged for 'Newsletter'.", err=True)
        sys.exit(1)

    workspace.title = title
    click.echo(f"Synthesizing {len(workspace.selected_ids)} signal(s)...", err=True)
    if not asyncio.run(workspace.draft_from_selected()):
        click.echo(workspace.draft_slot.notice, err=True)
        sys.exit(1)

    _emit_draft(workspace, output, export, settings)


def main():
    cli()


if __name__ == "__main__":
    main()
