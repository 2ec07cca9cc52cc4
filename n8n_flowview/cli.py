"""CLI interface for the n8n-flowview workflow diagram viewer."""

import asyncio
import logging
import sys
import threading
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from n8n_flowview import __version__
from n8n_flowview.classify import classify_node_type
from n8n_flowview.converter import convert_workflow
from n8n_flowview.exceptions import RenderError, WorkflowLoadError
from n8n_flowview.models import parse_workflow
from n8n_flowview.renderer import create_renderer
from n8n_flowview.scanner import WorkflowScanner
from n8n_flowview.server import create_server
from n8n_flowview.session import FlowSession
from n8n_flowview.summary import build_summary

# Initialize Rich console and logger
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler.

    Args:
        verbose: Enable debug level logging
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )

    # Suppress verbose loggers
    logging.getLogger("werkzeug").setLevel(logging.ERROR)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def load_session(workflow_file: Path) -> FlowSession:
    """Create a session with a workflow file already loaded.

    Raises:
        click.ClickException: If the file is rejected
    """
    session = FlowSession()
    if not session.load(workflow_file.name, workflow_file.read_bytes()):
        raise click.ClickException(f"{session.error} ({workflow_file})")
    return session


def run_server_thread(session: FlowSession, port: int = 5000) -> threading.Thread:
    """Run Flask server in a background thread.

    Args:
        session: Session the server exposes
        port: Port number for the server

    Returns:
        Thread object running the server
    """
    server = create_server(port=port, debug=False, session=session)

    def run_server():
        server.run(host="127.0.0.1")

    thread = threading.Thread(target=run_server, daemon=True)
    thread.start()

    # Wait for server to start
    time.sleep(2)

    return thread


@click.group()
@click.version_option(version=__version__, prog_name="n8n-flowview")
def cli():
    """n8n-flowview - View n8n workflow JSON files as interactive diagrams.

    Load an exported workflow in the browser, inspect it in the terminal,
    or capture the diagram as a PNG.
    """
    pass


@cli.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=False)
@click.option("--host", default="127.0.0.1", help="Host address to bind to (default: 127.0.0.1)")
@click.option("--port", default=5000, type=int, help="Flask server port (default: 5000)")
@click.option("--debug", is_flag=True, help="Enable Flask debug mode")
@click.option("--open", "open_browser", is_flag=True, help="Open the viewer in a browser")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def serve(
    workflow_file: Optional[Path],
    host: str,
    port: int,
    debug: bool,
    open_browser: bool,
    verbose: bool,
):
    """Serve the interactive diagram viewer.

    WORKFLOW_FILE: Optional workflow JSON file to show on startup
    """
    setup_logging(verbose)

    session = load_session(workflow_file) if workflow_file else FlowSession()
    server = create_server(port=port, debug=debug, session=session)
    url = f"http://{host}:{port}/"

    console.print(Panel.fit(
        f"[bold cyan]n8n Flow Viewer[/bold cyan]\n"
        f"URL: {url}\n"
        f"Status: {escape(session.status_text())}",
        border_style="cyan"
    ))

    if open_browser:
        threading.Timer(1.0, click.launch, args=(url,)).start()

    try:
        server.run(host=host)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


@cli.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def inspect(workflow_file: Path, verbose: bool):
    """Print the nodes and edges a workflow converts to.

    WORKFLOW_FILE: Path to the workflow JSON file
    """
    setup_logging(verbose)

    try:
        workflow = parse_workflow(workflow_file.read_bytes())
    except WorkflowLoadError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}: {escape(e.details)}")
        sys.exit(1)

    graph = convert_workflow(workflow)

    nodes_table = Table(title="Nodes", show_header=True, header_style="bold magenta")
    nodes_table.add_column("ID", style="dim")
    nodes_table.add_column("Name", style="cyan")
    nodes_table.add_column("Category")
    nodes_table.add_column("Summary")
    nodes_table.add_column("Type", style="dim")

    for node in graph.nodes:
        summary = build_summary(node.data)
        nodes_table.add_row(
            escape(node.id),
            escape(summary.label),
            classify_node_type(summary.node_type).label,
            escape("\n".join(summary.lines())),
            escape(summary.node_type),
        )

    edges_table = Table(title="Edges", show_header=True, header_style="bold magenta")
    edges_table.add_column("ID", style="dim")
    edges_table.add_column("Source", style="cyan")
    edges_table.add_column("Target", style="cyan")
    edges_table.add_column("Handles")

    for edge in graph.edges:
        edges_table.add_row(
            escape(edge.id),
            escape(edge.source),
            escape(edge.target),
            f"{edge.sourceHandle} → {edge.targetHandle}",
        )

    console.print(nodes_table)
    console.print(edges_table)

    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Nodes: {len(graph.nodes)}")
    console.print(f"  Edges: {len(graph.edges)}")

    if graph.unresolved:
        console.print("\n[bold yellow]Unresolved references:[/bold yellow]")
        for reference in graph.unresolved:
            console.print(f"  [yellow]![/yellow] {escape(reference.describe())}")


@cli.command()
@click.argument("input_folder", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--recursive/--no-recursive", default=True, help="Scan subdirectories recursively")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def scan(input_folder: Path, recursive: bool, verbose: bool):
    """Scan a folder and check every workflow JSON file loads.

    INPUT_FOLDER: Directory containing workflow JSON files
    """
    setup_logging(verbose)

    console.print(Panel.fit(
        f"[bold cyan]Scanning workflows in:[/bold cyan] {input_folder}",
        border_style="cyan"
    ))

    try:
        with console.status("[bold green]Scanning files..."):
            scanner = WorkflowScanner(input_folder, recursive=recursive)
            workflows = scanner.scan()

        if not workflows:
            console.print("[yellow]No JSON files found in the specified folder.[/yellow]")
            return

        summary = scanner.get_summary()

        table = Table(title="Scan Results", show_header=True, header_style="bold magenta")
        table.add_column("File", style="cyan", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Nodes", justify="right")
        table.add_column("Edges", justify="right")
        table.add_column("Unresolved", justify="right")

        for workflow in workflows:
            status = "[green]Valid[/green]" if workflow.valid else "[red]Invalid[/red]"
            table.add_row(
                escape(str(workflow.path.relative_to(input_folder))),
                status,
                str(workflow.node_count) if workflow.valid else "-",
                str(workflow.edge_count) if workflow.valid else "-",
                str(len(workflow.unresolved)) if workflow.valid else "-",
            )

        console.print(table)

        console.print("\n[bold]Summary:[/bold]")
        console.print(f"  Total files: {summary['total_files']}")
        console.print(f"  [green]Valid workflows: {summary['valid_workflows']}[/green]")
        console.print(f"  [red]Invalid workflows: {summary['invalid_workflows']}[/red]")
        console.print(f"  Total nodes: {summary['total_nodes']}")
        console.print(f"  Total edges: {summary['total_edges']}")
        if summary["unresolved_references"]:
            console.print(f"  [yellow]Unresolved references: {summary['unresolved_references']}[/yellow]")

        invalid = scanner.get_invalid_workflows()
        if invalid:
            console.print("\n[bold red]Load Errors:[/bold red]")
            for workflow in invalid:
                console.print(f"  [red]✗[/red] {escape(workflow.path.name)}: {escape(workflow.error or '')}")

        if summary["invalid_workflows"] > 0:
            sys.exit(1)

    except (FileNotFoundError, NotADirectoryError) as e:
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Output PNG file path")
@click.option("--width", default=1920, type=int, help="Viewport width (default: 1920)")
@click.option("--height", default=1080, type=int, help="Viewport height (default: 1080)")
@click.option("--timeout", default=60, type=int, help="Render timeout in seconds (default: 60)")
@click.option("--port", default=5000, type=int, help="Flask server port (default: 5000)")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def snapshot(
    workflow_file: Path,
    output: Optional[Path],
    width: int,
    height: int,
    timeout: int,
    port: int,
    verbose: bool,
):
    """Capture a workflow diagram as a PNG.

    WORKFLOW_FILE: Path to the workflow JSON file
    """
    setup_logging(verbose)

    if output is None:
        output = workflow_file.with_suffix(".png")

    session = load_session(workflow_file)

    console.print(Panel.fit(
        f"[bold cyan]Capturing Workflow[/bold cyan]\n"
        f"File: {escape(workflow_file.name)}\n"
        f"{escape(session.status_text())}\n"
        f"Viewport: {width}x{height} @ 2x scale",
        border_style="cyan"
    ))

    try:
        console.print("[bold green]Starting Flask server...[/bold green]")
        run_server_thread(session, port=port)
        console.print(f"[green]✓[/green] Server running on http://127.0.0.1:{port}\n")

        with console.status("[bold cyan]Rendering diagram..."):
            asyncio.run(render_single_snapshot(output, width, height, timeout, port))

        file_size = output.stat().st_size / 1024  # KB
        console.print(f"\n[green]✓[/green] Snapshot saved: {output} ({file_size:.1f} KB)")

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except RenderError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        if verbose:
            console.print_exception()
        sys.exit(1)


async def render_single_snapshot(
    output_path: Path,
    width: int,
    height: int,
    timeout: int,
    port: int,
) -> None:
    """Render the served diagram once.

    Args:
        output_path: Output file path
        width: Viewport width
        height: Viewport height
        timeout: Timeout in seconds
        port: Server port number
    """
    async with create_renderer(
        server_url=f"http://127.0.0.1:{port}",
        width=width,
        height=height,
        timeout=timeout * 1000,  # Convert to milliseconds
    ) as renderer:
        await renderer.render_snapshot(output_path)


if __name__ == "__main__":
    cli()
