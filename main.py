#!/usr/bin/env python3
"""
ClaimIQ - Insurance Claim Analysis CLI
"""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional, List, Sequence

import click
import yaml
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.panel import Panel

from claimiq.decision.models import Outcome
from claimiq.exceptions import ClaimIQError
from claimiq.evaluation.evaluation_harness import (
    DEFAULT_EVALUATION_CASES, EvaluationCase, EvaluationHarness, EvaluationMetrics, load_cases
)
from claimiq.ingestion.document_index import DocumentIndex
from claimiq.ingestion.ingestion_pipeline import IngestionPipeline, IngestionResult
from claimiq.models.llm_manager import LLMManager
from claimiq.pipeline import ClaimAnalysis, ClaimPipeline

logger = logging.getLogger(__name__)

OUTCOME_STYLES = {
    Outcome.APPROVED: "green",
    Outcome.REJECTED: "red",
    Outcome.PENDING: "yellow",
}


def load_env_file(env_file: Path = Path(".env")):
    """Load environment variables from .env file if it exists."""
    if env_file.exists():
        with open(env_file, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    os.environ.setdefault(key.strip(), value.strip())


def load_config(config_path: str = "config/config.yaml") -> dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
        return config
    except FileNotFoundError:
        print(f"❌ Configuration file not found: {config_path}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"❌ Error parsing configuration file: {e}")
        sys.exit(1)


def setup_logging(config: dict):
    """Setup logging configuration."""
    log_config = config.get("logging", {})
    log_level = getattr(logging, log_config.get("level", "INFO"))
    log_format = log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    log_file = log_config.get("file", "logs/claimiq.log")
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


class ClaimIQSystem:
    """Main ClaimIQ system class."""

    def __init__(self, config: dict, api_key: Optional[str] = None):
        self.config = config
        self.console = Console()

        self.llm_manager = LLMManager(config, api_key=api_key)
        self.document_index = DocumentIndex()
        self.ingestion = IngestionPipeline(config.get("ingestion", {}), self.document_index)
        self.pipeline = ClaimPipeline(self.llm_manager, self.document_index, config)
        self.harness = EvaluationHarness(self.pipeline, config.get("evaluation", {}))

        self.debug_mode = config.get("debug", {}).get("enabled", False)

    async def query(self, user_query: str, debug: bool = False) -> ClaimAnalysis:
        """Run one claim query through the pipeline."""
        debug = debug or self.debug_mode

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True
        ) as progress:
            task = progress.add_task("Analyzing claim...", total=None)
            analysis = await self.pipeline.process(user_query, debug=debug)
            progress.update(task, description="Analysis complete")

        return analysis

    def display_result(self, analysis: ClaimAnalysis, debug: bool = False):
        """Display a claim analysis in a formatted way."""
        decision = analysis.decision
        style = OUTCOME_STYLES[decision.outcome]

        query_table = Table(title="Structured Query")
        query_table.add_column("Field", style="cyan")
        query_table.add_column("Value", style="white")
        for key, value in analysis.structured_query.to_dict().items():
            query_table.add_row(key, str(value))
        self.console.print(query_table)

        clause_table = Table(title="Relevant Clauses")
        clause_table.add_column("Section", style="cyan")
        clause_table.add_column("Category", style="magenta")
        clause_table.add_column("Match", style="green")
        clause_table.add_column("Content", style="white")
        for clause in analysis.clauses:
            clause_table.add_row(
                clause.section,
                clause.category.value,
                f"{round(clause.confidence * 100)}%",
                clause.content if len(clause.content) <= 200 else clause.content[:200] + "..."
            )
        if not analysis.clauses:
            clause_table.add_row("-", "-", "-", "No clause scored above the relevance threshold")
        self.console.print(clause_table)

        self.console.print(Panel(
            f"[bold {style}]{decision.outcome.value.upper()}[/bold {style}]\n"
            f"Coverage: {decision.amount_display}\n"
            f"Confidence: {round(decision.confidence * 100)}%\n\n"
            f"{decision.justification}",
            title="[bold blue]Decision[/bold blue]",
            border_style=style
        ))

        if debug:
            debug_table = Table(title="Debug Information")
            debug_table.add_column("Component", style="cyan")
            debug_table.add_column("Details", style="white")
            debug_table.add_row("Query Id", analysis.query_id)
            debug_table.add_row("Decision Id", decision.id)
            debug_table.add_row("Strategy", self.llm_manager.mode.value)
            for stage, seconds in analysis.stage_timings.items():
                debug_table.add_row(f"{stage} time", f"{seconds * 1000:.1f} ms")
            self.console.print(debug_table)

    def ingest_files(self, file_paths: Sequence[str]) -> List[IngestionResult]:
        """Ingest files into the session's document index."""
        results = self.ingestion.ingest(file_paths)
        self.display_ingestion_results(results)
        return results

    def display_ingestion_results(self, results: List[IngestionResult]):
        """Display ingestion results in a formatted table."""
        if not results:
            return

        table = Table(title="Ingestion Results")
        table.add_column("File", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Document Id", style="dim")
        table.add_column("Chunks", style="magenta")
        table.add_column("Words", style="yellow")
        table.add_column("Time (s)", style="white")

        for result in results:
            table.add_row(
                Path(result.file_path).name,
                "✅ Success" if result.success else "❌ Failed",
                result.document_id or "-",
                str(result.chunks_added),
                str(result.word_count),
                f"{result.processing_time:.2f}"
            )
        self.console.print(table)

        errors = [error for result in results for error in result.errors]
        if errors:
            self.console.print("\n[red]Errors:[/red]")
            for error in errors:
                self.console.print(f"  • {error}")

    async def evaluate(self, cases: Sequence[EvaluationCase]) -> EvaluationMetrics:
        """Run the evaluation harness and display the metrics."""
        metrics = await self.harness.evaluate(cases)
        self.display_metrics(metrics)
        return metrics

    def display_metrics(self, metrics: EvaluationMetrics):
        """Display evaluation metrics and per-case results."""
        case_table = Table(title="Evaluation Cases")
        case_table.add_column("Query", style="white")
        case_table.add_column("Decision", style="cyan")
        case_table.add_column("Confidence", style="magenta")
        case_table.add_column("Result", style="green")
        for result in metrics.per_case:
            case_table.add_row(
                result.query,
                result.decision or f"error: {result.error}",
                f"{round(result.confidence * 100)}%",
                "✅" if result.correct else "❌"
            )
        self.console.print(case_table)

        summary = Table(title="Evaluation Metrics")
        summary.add_column("Metric", style="cyan")
        summary.add_column("Value", style="white")
        summary.add_row("Accuracy", f"{metrics.accuracy * 100:.1f}%")
        summary.add_row("Precision", f"{metrics.precision * 100:.1f}%")
        summary.add_row("Recall", f"{metrics.recall * 100:.1f}%")
        summary.add_row("F1 Score", f"{metrics.f1_score:.3f}")
        summary.add_row("Avg Response Time", f"{metrics.response_time:.0f}ms")
        summary.add_row("Avg Confidence", f"{metrics.confidence_score * 100:.1f}%")
        self.console.print(summary)

    def show_stats(self):
        """Display system statistics."""
        index_stats = self.document_index.get_stats()

        table = Table(title="Document Index Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Documents", str(index_stats["total_documents"]))
        table.add_row("Chunks", str(index_stats["total_chunks"]))
        table.add_row("Words", str(index_stats["total_words"]))
        table.add_row("Avg Words/Chunk", f"{index_stats['avg_chunk_length']:.1f}")

        llm_table = Table(title="Analysis Strategy")
        llm_table.add_column("Metric", style="cyan")
        llm_table.add_column("Value", style="white")
        llm_table.add_row("Mode", self.llm_manager.mode.value)
        llm_table.add_row("Providers", ", ".join(self.llm_manager.get_available_providers()) or "none")
        for rule in self.pipeline.synthesizer.get_rules():
            llm_table.add_row("Heuristic rule", rule)
        for name, words in self.pipeline.interpreter.get_vocabularies().items():
            llm_table.add_row(f"Known {name}", ", ".join(words))

        self.console.print(table)
        self.console.print(llm_table)

    async def interactive_mode(self):
        """Run the system in interactive mode."""
        self.console.print(Panel(
            "[bold blue]ClaimIQ Claim Analysis[/bold blue]\n"
            "Describe a claim, e.g. '46-year-old male, knee surgery in Pune, 3-month-old insurance policy'.\n"
            "Type 'quit' to exit, 'help' for commands.",
            border_style="blue"
        ))

        while True:
            try:
                line = click.prompt("\nClaim").strip()
                command, _, argument = line.partition(" ")
                command = command.lower()

                if command in ['quit', 'exit', 'q']:
                    break
                elif command == 'help':
                    self.console.print(
                        "[bold]Available Commands:[/bold]\n"
                        "• Any other text is analyzed as a claim\n"
                        "• 'upload <path>' - Add a policy document\n"
                        "• 'remove <document-id>' - Remove a policy document\n"
                        "• 'stats' - Show system statistics\n"
                        "• 'eval' - Run the accuracy evaluation\n"
                        "• 'quit' - Exit the system"
                    )
                elif command == 'upload' and argument:
                    self.ingest_files(argument.split())
                elif command == 'remove' and argument:
                    if self.document_index.remove(argument.strip()):
                        self.console.print(f"[green]Removed {argument.strip()}[/green]")
                    else:
                        self.console.print(f"[yellow]No document {argument.strip()}[/yellow]")
                elif command == 'stats':
                    self.show_stats()
                elif command == 'eval':
                    await self.evaluate(DEFAULT_EVALUATION_CASES)
                elif line:
                    analysis = await self.query(line, debug=self.debug_mode)
                    self.display_result(analysis, debug=self.debug_mode)

            except (KeyboardInterrupt, click.exceptions.Abort):
                self.console.print("\n[yellow]Exiting...[/yellow]")
                break


@click.group()
@click.option('--config', '-c', default='config/config.yaml', help='Configuration file path')
@click.option('--api-key', envvar='CLAIMIQ_API_KEY', default=None, help='Completion service API key')
@click.option('--documents', '-f', multiple=True, type=click.Path(exists=True, dir_okay=False),
              help='Policy document to load before running the command')
@click.option('--debug', '-d', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, config, api_key, documents, debug):
    """ClaimIQ insurance claim analysis CLI."""
    load_env_file()

    ctx.ensure_object(dict)
    ctx.obj['config'] = load_config(config)
    ctx.obj['debug'] = debug

    setup_logging(ctx.obj['config'])

    if debug:
        ctx.obj['config'].setdefault('debug', {})['enabled'] = True

    system = ClaimIQSystem(ctx.obj['config'], api_key=api_key)
    if documents:
        system.ingest_files(documents)
    ctx.obj['system'] = system


@cli.command()
@click.argument('query')
@click.option('--json', 'as_json', is_flag=True, help='Print the decision export as JSON')
@click.pass_context
def query(ctx, query, as_json):
    """Analyze a single claim query."""
    system = ctx.obj['system']

    async def run_query():
        analysis = await system.query(query, debug=ctx.obj['debug'])
        if as_json:
            system.console.print_json(data=analysis.decision.to_export_dict())
        else:
            system.display_result(analysis, debug=ctx.obj['debug'])

    asyncio.run(run_query())


@cli.command()
@click.argument('file_paths', nargs=-1, required=True, type=click.Path())
@click.pass_context
def ingest(ctx, file_paths):
    """Extract and chunk policy documents, reporting the results."""
    system = ctx.obj['system']
    system.ingest_files(file_paths)
    system.show_stats()


@cli.command()
@click.option('--cases', type=click.Path(exists=True, dir_okay=False), help='YAML file of labeled cases')
@click.pass_context
def evaluate(ctx, cases):
    """Score the pipeline on labeled cases."""
    system = ctx.obj['system']
    try:
        evaluation_cases = load_cases(Path(cases)) if cases else DEFAULT_EVALUATION_CASES
    except ClaimIQError as e:
        raise click.BadParameter(str(e), param_hint="--cases") from e

    if not system.document_index:
        system.console.print("[yellow]No documents loaded, retrieval will use the fallback clauses.[/yellow]")

    asyncio.run(system.evaluate(evaluation_cases))


@cli.command()
@click.pass_context
def stats(ctx):
    """Show system statistics."""
    ctx.obj['system'].show_stats()


@cli.command()
@click.pass_context
def interactive(ctx):
    """Start interactive claim analysis mode."""
    asyncio.run(ctx.obj['system'].interactive_mode())


if __name__ == "__main__":
    cli()
