import typer
import json
from pathlib import Path
from typing import Optional
import logging
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from .config import get_settings
from .errors import AppError
from .models import Curriculum
from .pdf_parser import extract_metadata
from .processing_service import CurriculumService
from .providers import ProviderRegistry
from .streaming import CallbackSink

# Configure logging
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

# Initialize Typer app
app = typer.Typer(
    name="curriculum-builder",
    help="Generate structured curricula from PDF documents using AI",
    add_completion=False
)

# Initialize console for rich output
console = Console()


@app.command()
def generate(
    pdf_path: Path = typer.Argument(..., help="Path to the PDF file to process"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Provider to use (mock, ollama)"),
    stream: bool = typer.Option(False, "--stream", help="Show progress checkpoints while generating"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the curriculum JSON to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
):
    """Generate a curriculum from a PDF file"""

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate inputs
    if not pdf_path.exists():
        console.print(f"[red]Error: PDF file not found: {pdf_path}[/red]")
        raise typer.Exit(1)

    if pdf_path.suffix.lower() != '.pdf':
        console.print("[red]Error: File must be a PDF[/red]")
        raise typer.Exit(1)

    content = pdf_path.read_bytes()
    service = CurriculumService(registry=ProviderRegistry(get_settings()))

    try:
        metadata = extract_metadata(content)
        console.print(f"[dim]Pages: {metadata['page_count']}[/dim]")

        if stream:
            sink = CallbackSink(
                on_progress=lambda status, message, _metadata: console.print(f"[cyan]{status}[/cyan] {message}")
            )
            result = service.run_streaming(content, sink, provider)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console
            ) as progress:
                progress.add_task("Generating curriculum...", total=None)
                result = service.run(content, provider)

    except AppError as e:
        console.print(f"[red]Error ({e.code}): {e.public_message}[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Error processing PDF: {str(e)}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Curriculum generated by {result.provider_name}[/green]")
    display_curriculum(result.curriculum)

    if output:
        output.write_text(json.dumps(result.to_wire(), indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"[green]✓ Curriculum saved to: {output}[/green]")


@app.command()
def providers():
    """List available generation providers"""
    default = get_settings().AI_PROVIDER.lower()

    table = Table(title="Generation Providers")
    table.add_column("Provider", style="cyan")
    table.add_column("Default", style="magenta")

    for name in ProviderRegistry.available_providers():
        table.add_row(name, "✓" if name == default else "")

    console.print(table)


def display_curriculum(curriculum: Curriculum):
    """Display the curriculum as a tree"""
    tree = Tree(f"[bold blue]{curriculum.title}[/bold blue]")
    for module in curriculum.modules:
        module_branch = tree.add(f"[bold]{module.title}[/bold]")
        for topic in module.topics:
            topic_branch = module_branch.add(topic.title)
            for lesson in topic.lessons:
                topic_branch.add(f"[dim]{lesson.title}[/dim]")
    console.print(tree)
    console.print(
        f"[dim]{len(curriculum.modules)} modules, {curriculum.count_topics()} topics, "
        f"{curriculum.count_lessons()} lessons[/dim]"
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Host to bind the server to"),
    port: Optional[int] = typer.Option(None, "--port", help="Port to bind the server to")
):
    """Start the FastAPI server"""
    settings = get_settings()
    host = host or settings.HOST
    port = port or settings.PORT

    console.print(f"[green]Starting server on {host}:{port}[/green]")

    import uvicorn
    uvicorn.run("curriculum_builder.api:app", host=host, port=port)


if __name__ == "__main__":
    app()
