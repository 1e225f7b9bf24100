"""CLI interface for Juuret."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from .corpus import CorpusIndex
from .exceptions import JuuretError
from .parsing import FamilyParser

app = typer.Typer(
    name="juuret",
    help="Family-network resolution and citations for Juuret Kälviällä transcriptions",
    add_completion=False,
)
console = Console()


def get_config():
    """Load configuration from environment."""
    from dotenv import load_dotenv
    import os

    load_dotenv()

    return {
        "anthropic_api_key": os.getenv("ANTHROPIC_API_KEY"),
        "log_level": os.getenv("JUURET_LOG_LEVEL", "WARNING").upper(),
    }


def build_parser(config: dict) -> FamilyParser:
    """Create the LLM-backed family parser."""
    from .parsing import AnthropicClient, LLMFamilyParser

    return LLMFamilyParser(AnthropicClient())


def _load_corpus(corpus_path: Path) -> CorpusIndex:
    if not corpus_path.exists():
        console.print(f"[red]Error: File not found: {corpus_path}[/red]")
        raise typer.Exit(1)
    return CorpusIndex(corpus_path.read_text(encoding="utf-8"))


def _require_parser() -> FamilyParser:
    config = get_config()

    from .logging import configure_logging

    level = config["log_level"]
    configure_logging(level if level in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "WARNING")

    if not config.get("anthropic_api_key"):
        console.print("[red]Error: No API key configured. Set ANTHROPIC_API_KEY.[/red]")
        raise typer.Exit(1)
    return build_parser(config)


def _process(corpus: CorpusIndex, family_id: str):
    from .resolution import FamilyResolver
    from .workflow import FamilyNetworkWorkflow

    parser = _require_parser()
    workflow = FamilyNetworkWorkflow(FamilyResolver(parser, corpus=corpus))

    async def run():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(f"Resolving {family_id}...", total=None)
            result = await workflow.process(family_id)
            progress.update(task, completed=True)
        return result

    try:
        result = asyncio.run(run())
    except JuuretError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return result, workflow.resolver.statistics


@app.command()
def families(
    corpus_path: Path = typer.Argument(..., help="Path to the corpus text file"),
):
    """List every family id found in the corpus."""
    corpus = _load_corpus(corpus_path)
    ids = corpus.family_ids()

    table = Table(title=f"Families in {corpus_path.name}")
    table.add_column("#", style="dim")
    table.add_column("Family ID")
    for index, family_id in enumerate(ids, start=1):
        table.add_row(str(index), family_id)

    console.print(table)
    console.print(f"[dim]{len(ids)} families[/dim]")


@app.command()
def locate(
    corpus_path: Path = typer.Argument(..., help="Path to the corpus text file"),
    family_id: str = typer.Argument(..., help="Family id, e.g. 'KORPI 6'"),
):
    """Print the text block of one family."""
    corpus = _load_corpus(corpus_path)
    text = corpus.extract_family_text(family_id)
    if text is None:
        console.print(f"[red]Family {family_id} not found[/red]")
        raise typer.Exit(1)
    console.print(Panel(Text(text), title=family_id.upper()))


@app.command()
def search(
    corpus_path: Path = typer.Argument(..., help="Path to the corpus text file"),
    token: str = typer.Argument(..., help="Text to search for, e.g. a birth date"),
):
    """List families whose text contains TOKEN."""
    corpus = _load_corpus(corpus_path)
    blocks = corpus.find_blocks_containing(token)
    if not blocks:
        console.print(f"[yellow]No family contains '{token}'[/yellow]")
        return

    table = Table(title=f"Families containing '{token}'")
    table.add_column("Family ID")
    table.add_column("Line")
    for block in blocks:
        line = next((ln for ln in block.text.splitlines() if token in ln), "")
        table.add_row(block.family_id, line.strip())
    console.print(table)


@app.command()
def resolve(
    corpus_path: Path = typer.Argument(..., help="Path to the corpus text file"),
    family_id: str = typer.Argument(..., help="Family id, e.g. 'KORPI 6'"),
    as_json: bool = typer.Option(False, "--json", help="Print the network as JSON"),
):
    """Resolve a family's cross-references and show the network."""
    corpus = _load_corpus(corpus_path)
    result, statistics = _process(corpus, family_id)

    if as_json:
        typer.echo(json.dumps(result.network.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return

    console.print(Panel(Text(result.network.summary()), title="Family Network"))

    if result.report is not None and result.report.unresolved:
        table = Table(title="Unresolved References")
        table.add_column("Kind")
        table.add_column("Person")
        table.add_column("Status")
        for outcome in result.report.unresolved:
            table.add_row(outcome.kind.value, outcome.person, outcome.status.value)
        console.print(table)

    stats = Table(title="Resolution Statistics")
    stats.add_column("Kind")
    stats.add_column("Attempted")
    stats.add_column("Resolved")
    for label, counts in (
        ("as child", statistics.as_child),
        ("as parent", statistics.as_parent),
        ("spouse as child", statistics.spouse_as_child),
    ):
        stats.add_row(label, str(counts.attempted), str(counts.resolved))
    console.print(stats)
    console.print(f"Success rate: {statistics.success_rate:.0%}")


@app.command()
def cite(
    corpus_path: Path = typer.Argument(..., help="Path to the corpus text file"),
    family_id: str = typer.Argument(..., help="Family id, e.g. 'KORPI 6'"),
    person: str = typer.Option(None, "--person", "-p", help="Show this person's citation"),
    output: Path = typer.Option(None, "--output", "-o", help="Write all citations as JSON"),
):
    """Generate citations for a family and its members."""
    corpus = _load_corpus(corpus_path)
    result, _ = _process(corpus, family_id)
    citations = result.citations

    if person:
        text = citations.lookup(person)
        if text is None:
            console.print(f"[red]No citation for {person} in {citations.family_id}[/red]")
            known = ", ".join(p.display_name for p in citations.persons())
            console.print(f"[dim]Known: {known}[/dim]")
            raise typer.Exit(1)
        console.print(text, markup=False, highlight=False)
    else:
        console.print(citations.family_citation, markup=False, highlight=False)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            json.dump(citations.as_dict(), f, indent=2, ensure_ascii=False)
        console.print(f"[green]Citations saved to {output}[/green]")



if __name__ == "__main__":
    app()
