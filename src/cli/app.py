"""Typer CLI application for quiz generation."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from src.config.settings import get_settings
from src.errors import QuizGenerationError
from src.export.docx_generator import ensure_output_directory, export_quiz_to_docx, save_docx
from src.extraction.pdf_text import page_count
from src.graph.workflow import generate_quiz
from src.models.quiz import (
    ExportRequest,
    GenerationOptions,
    QuestionDifficulty,
    QuestionType,
    QuizItemSet,
)
from src.pipeline.composer import QUESTION_TYPE_LABELS
from src.pipeline.parser import serialize_quiz_items

app = typer.Typer(
    name="doc-quiz",
    help="Generate quizzes with answer keys from PDF documents",
    add_completion=False,
)

console = Console()


def configure_logging(level: str) -> None:
    """Route log records through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command()
def generate(
    document: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="PDF document to generate questions from",
    ),
    num_questions: int = typer.Option(
        5,
        "--questions",
        "-n",
        help="Number of questions to generate",
        min=1,
        max=20,
    ),
    question_types: List[QuestionType] = typer.Option(
        [QuestionType.MCQ],
        "--type",
        "-t",
        help="Question types (can specify multiple times: -t mcq -t trueFalse)",
        case_sensitive=False,
    ),
    difficulty: QuestionDifficulty = typer.Option(
        QuestionDifficulty.MEDIUM,
        "--difficulty",
        "-d",
        help="Difficulty level",
        case_sensitive=False,
    ),
    focus: str = typer.Option(
        "",
        "--focus",
        "-f",
        help="Subject area to prioritise",
    ),
    title: Optional[str] = typer.Option(
        None,
        "--title",
        help="Quiz title (defaults to the document name)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file name (without extension)",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Directory to write files to",
    ),
    save_json: bool = typer.Option(
        False,
        "--json",
        help="Also save the generated items as JSON",
    ),
) -> None:
    """
    Generate a quiz from a PDF document.

    Example:
        doc-quiz generate notes.pdf -n 10 -t mcq -t trueFalse -d hard --focus "photosynthesis"
    """
    settings = get_settings()
    if not settings.openai_api_key:
        console.print(
            "[red]Error:[/red] OPENAI_API_KEY environment variable not set.",
            style="bold",
        )
        console.print("\nPlease set your API key:\n  export OPENAI_API_KEY='your-key-here'")
        raise typer.Exit(code=1)

    options = GenerationOptions(
        num_questions=num_questions,
        question_types=question_types,
        difficulty=difficulty,
    )
    quiz_title = title or document.stem.replace("_", " ")
    output_name = output or settings.default_output_path
    output_dir = output_dir or settings.output_dir

    data = document.read_bytes()
    display_config(document, data, options, focus, quiz_title)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Generating questions...", total=None)

            items = generate_quiz(
                data,
                options,
                focus_hint=focus,
                source_label=document.name,
                settings=settings,
            )

            progress.update(task, description="[green]Generation complete!")

    except QuizGenerationError as e:
        console.print(f"\n[red]Error during quiz generation:[/red] {e}", style="bold")
        raise typer.Exit(code=1)

    display_quiz_summary(items, options)

    if not items.questions:
        console.print("[yellow]No questions were generated; nothing to export.[/yellow]")
        raise typer.Exit(code=1)

    console.print("\n[cyan]Exporting to DOCX...[/cyan]")
    output_file = save_docx(export_quiz_to_docx(items.questions, quiz_title), output_name, output_dir)
    console.print(f"\n[green]✓[/green] Quiz exported to: {output_file}")

    if save_json:
        json_path = ensure_output_directory(output_dir) / f"{Path(output_name).name}.json"
        json_path.write_text(serialize_quiz_items(items), encoding="utf-8")
        console.print(f"[green]✓[/green] Items saved to: {json_path}")


@app.command()
def export(
    items_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help='JSON file with a "questions" list',
    ),
    title: str = typer.Option(..., "--title", help="Quiz title"),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file name (without extension)",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Directory to write the document to",
    ),
) -> None:
    """Render a saved item set to a DOCX quiz with answer key."""
    settings = get_settings()
    try:
        payload = json.loads(items_file.read_text(encoding="utf-8"))
        request = ExportRequest.model_validate({**payload, "title": title})
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        console.print(f"[red]Error:[/red] Invalid items file: {e}", style="bold")
        raise typer.Exit(code=1)

    output_file = save_docx(
        export_quiz_to_docx(request.questions, request.title),
        output or settings.default_output_path,
        output_dir or settings.output_dir,
    )
    console.print(f"[green]✓[/green] Quiz exported to: {output_file}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("src.api.app:app", host=host, port=port)


@app.command()
def info() -> None:
    """Display information about the quiz generator."""
    settings = get_settings()
    info_text = f"""
[bold cyan]Document Quiz Generator[/bold cyan]
Version: 0.1.0

[bold]Pipeline:[/bold]
  • Text extraction - reads the PDF page by page
  • Request composer - calibrates the task to difficulty and item types
  • Remote job - runs a file-search assistant to completion
  • Result parser - validates every generated item

[bold]Item types:[/bold] {", ".join(QUESTION_TYPE_LABELS.values())}
[bold]Model:[/bold] {settings.model_name}
[bold]Run timeout:[/bold] {settings.run_timeout_seconds:.0f}s
    """
    console.print(Panel(info_text, title="Quiz Generator Info", border_style="cyan"))


def display_config(
    document: Path,
    data: bytes,
    options: GenerationOptions,
    focus: str,
    title: str,
) -> None:
    """Display the configuration before generation."""
    table = Table(title="Quiz Configuration", show_header=False, border_style="cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Document", document.name)
    try:
        table.add_row("Pages", str(page_count(data)))
    except QuizGenerationError:
        table.add_row("Pages", "[red]unreadable[/red]")
    table.add_row("Title", title)
    table.add_row("Questions", str(options.num_questions))
    table.add_row(
        "Types", ", ".join(QUESTION_TYPE_LABELS[t] for t in options.question_types)
    )
    table.add_row("Difficulty", options.difficulty.capitalize())
    if focus:
        table.add_row("Focus", focus)

    console.print()
    console.print(table)


def display_quiz_summary(items: QuizItemSet, options: GenerationOptions) -> None:
    """Display a summary of the generated items."""
    console.print("\n[bold green]Quiz Generated Successfully![/bold green]")

    table = Table(title="Quiz Summary", border_style="green")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    count = len(items)
    count_str = str(count)
    if count != options.num_questions:
        count_str = f"[yellow]{count} (requested {options.num_questions})[/yellow]"
    table.add_row("Total Questions", count_str)

    for question_type, type_count in items.count_by_type().items():
        table.add_row(QUESTION_TYPE_LABELS[question_type], str(type_count))

    console.print()
    console.print(table)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """
    Document Quiz Generator - Create quizzes with answer keys from PDFs.
    """
    configure_logging("DEBUG" if verbose else get_settings().log_level)


if __name__ == "__main__":
    app()
