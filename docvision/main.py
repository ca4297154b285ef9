import asyncio
import json
import sys
from typing import Optional

import click
import yaml
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import ConfigManager
from .constants import SUCCESS_BATCH
from .errors import DocVisionError
from .ingest.batch import collect_documents, process_batch, write_outcomes
from .ingest.document_processor import process_document
from .ingest.document_types import get_supported_file_types, resolve_document_kind
from .models import ExtractionResult
from .utils.error_handler import handle_cli_error, report_extraction_error
from .utils.logging_config import setup_logging
from .utils.progress import create_progress_bar

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])

console = Console()


def _load_config(config: Optional[str]) -> ConfigManager:
    try:
        return ConfigManager(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))


def _print_result(result: ExtractionResult, as_json: bool, show_pages: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_host_dict(include_metadata=True), ensure_ascii=False, indent=2))
        return

    if show_pages and result.pages is not None:
        for page in result.pages:
            click.echo(f"--- Page {page.page_number} ---")
            click.echo(page.text)
        return

    click.echo(result.text)


@click.group(context_settings=CONTEXT_SETTINGS, invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """Extract plain text from images, PDFs, DOCX, EPUB and text files."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@cli.command()
@click.argument('uri')
@click.option('--type', 'doc_type', type=click.Choice(['auto', 'pdf', 'image'], case_sensitive=False),
              default='auto', help='Force the document type instead of using the file extension')
@click.option('--language', 'languages', multiple=True,
              help='BCP 47 language tag for OCR. Can be specified multiple times: --language en-US --language fr')
@click.option('--mode', type=click.Choice(['fast', 'accurate'], case_sensitive=False),
              help='OCR recognition level (default: accurate)')
@click.option('--auto-detect/--no-auto-detect', default=None,
              help='Let the OCR engine detect the language (default: on when no --language is given)')
@click.option('--language-correction/--no-language-correction', default=None,
              help='Use dictionary based language correction during OCR (default: on)')
@click.option('--json', 'as_json', is_flag=True, help='Print the full result as JSON')
@click.option('--pages', 'show_pages', is_flag=True, help='Print PDF text page by page')
@click.option('--config', help='Path to the configuration YAML file')
@click.option('--verbose', is_flag=True, help='Enable verbose logging')
def recognize(uri: str, doc_type: str, languages: tuple, mode: Optional[str],
              auto_detect: Optional[bool], language_correction: Optional[bool],
              as_json: bool, show_pages: bool, config: Optional[str], verbose: bool):
    """Extract text from a single document at URI (path or file:// URI)."""
    manager = _load_config(config)
    setup_logging(verbose or manager.verbose, manager.log_file)

    defaults = manager.recognition_defaults
    request = {
        'uri': uri,
        'type': doc_type,
        'languages': languages or defaults.languages,
        'mode': mode.lower() if mode else defaults.mode,
        'auto_detect_language': auto_detect if auto_detect is not None else defaults.auto_detect_language,
        'use_language_correction': (
            language_correction if language_correction is not None else defaults.use_language_correction
        ),
    }

    try:
        result = process_document(request, settings=manager.settings)
    except DocVisionError as e:
        logger.debug(f"Extraction failed for {uri}: {e}")
        report_extraction_error(e)
        sys.exit(1)

    _print_result(result, as_json, show_pages)


@cli.command()
@click.argument('input_dir', type=click.Path(exists=True, file_okay=False))
@click.argument('output_dir', type=click.Path(file_okay=False))
@click.option('--concurrency', type=click.IntRange(min=1), help='Maximum number of documents extracted at once')
@click.option('--config', help='Path to the configuration YAML file')
@click.option('--verbose', is_flag=True, help='Enable verbose logging')
def batch(input_dir: str, output_dir: str, concurrency: Optional[int], config: Optional[str], verbose: bool):
    """Extract every supported document under INPUT_DIR into OUTPUT_DIR as .txt files."""
    manager = _load_config(config)
    setup_logging(verbose or manager.verbose, manager.log_file)
    settings = manager.settings

    paths = collect_documents(input_dir)
    if not paths:
        click.echo(f"No supported documents found in {input_dir}")
        return

    pbar = create_progress_bar(len(paths), 'Extracting')
    try:
        outcomes = asyncio.run(process_batch(
            paths,
            concurrency=concurrency or settings.concurrency,
            settings=settings,
            progress=pbar,
        ))
    finally:
        pbar.close()

    written = write_outcomes(outcomes, output_dir, input_dir)
    failed = [o for o in outcomes if not o.ok]

    for outcome in failed:
        click.echo(click.style(f"{outcome.path}: {outcome.error}", fg='red'), err=True)
    click.echo(SUCCESS_BATCH.format(processed=written, failed=len(failed)))

    if failed:
        sys.exit(1)


@cli.command()
def formats():
    """List supported file extensions and how each is extracted."""
    table = Table(title="Supported formats")
    table.add_column("Extension", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Method")

    for extension, method in get_supported_file_types().items():
        table.add_row(extension, resolve_document_kind(extension).value, method)

    console.print(table)


def main():
    try:
        # standalone_mode=False keeps click from exiting on errors so they reach
        # the handler below
        cli(standalone_mode=False)
    except (click.ClickException, click.UsageError) as e:
        handle_cli_error(e)
        sys.exit(1)
    except click.Abort:
        sys.exit(130)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unhandled error: {str(e)}", err=True)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
