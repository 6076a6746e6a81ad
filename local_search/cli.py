"""
Command Line Interface for local file search
"""
import os
from typing import Optional, Tuple
import click

from local_search.core.config import Config
from local_search.core.models import MatchMode
from local_search.output.presenter import render_json, render_list, render_table, write_csv
from local_search.search.engine import SearchEngine
from local_search.utils.helpers import split_csv_option
from local_search.utils.logger import setup_logging


DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


def load_config(config_file: Optional[str]) -> Config:
    """Load the configuration file, falling back to environment defaults"""
    try:
        if not config_file:
            return Config.from_env()
        return Config.load_from_file(config_file)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot load configuration {config_file}: {e}")


def resolve_mode(regex: bool, wildcard: bool, whole_word: bool) -> Optional[MatchMode]:
    selected = [
        mode for flag, mode in (
            (regex, MatchMode.REGEX),
            (wildcard, MatchMode.WILDCARD),
            (whole_word, MatchMode.WHOLE_WORD),
        ) if flag
    ]
    if len(selected) > 1:
        raise click.UsageError("--regex, --wildcard and --whole-word are mutually exclusive")
    return selected[0] if selected else None


@click.group()
@click.option('--config', '-c', type=click.Path(dir_okay=False), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', help='Also write logs to this file')
@click.pass_context
def cli(ctx, config, verbose, log_file):
    """Local file and content search"""
    setup_logging('DEBUG' if verbose else 'WARNING', log_file)

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose
    ctx.obj['log_file'] = log_file


@cli.command()
@click.option('--query', '-q', help='Single search term')
@click.option('--term', '-t', 'terms', multiple=True, help='Search term (can be specified multiple times)')
@click.option('--content/--no-content', default=None, help='Also search inside supported files')
@click.option('--regex', is_flag=True, help='Treat terms as regular expressions')
@click.option('--wildcard', is_flag=True, help='Treat terms as */? wildcard patterns')
@click.option('--whole-word', is_flag=True, help='Match terms as whole words only')
@click.option('--fuzzy/--no-fuzzy', default=None, help='Accept near matches by edit distance (default on)')
@click.option('--pdf/--no-pdf', default=None, help='Search PDF content (requires pdftotext)')
@click.option('--root', '-r', 'roots', multiple=True, help='Directory to search (can be specified multiple times)')
@click.option('--include-ext', multiple=True, help='Only these extensions (repeatable or comma separated)')
@click.option('--exclude-ext', multiple=True, help='Skip these extensions (repeatable or comma separated)')
@click.option('--since', type=click.DateTime(formats=DATE_FORMATS), help='Only files modified on or after this date')
@click.option('--min-size', type=click.IntRange(min=0), help='Minimum file size in KB')
@click.option('--max-size', type=click.IntRange(min=0), help='Maximum file size in KB')
@click.option('--exclude-dir', multiple=True, help='Directory names to skip (repeatable or comma separated)')
@click.option('--max-depth', type=click.IntRange(min=0), help='Maximum directory depth below each root')
@click.option('--trace-folders', is_flag=True, default=None, help='Log every directory visited')
@click.option('--snippet/--no-snippet', default=None, help='Show a preview around content hits')
@click.option('--max-results', type=click.IntRange(min=1), help='Maximum number of results')
@click.option('--json', 'json_output', is_flag=True, default=None, help='Print results as JSON')
@click.option('--list', 'list_output', is_flag=True, default=None, help='Print results as a list')
@click.option('--csv', 'csv_path', type=click.Path(dir_okay=False), help='Export results to a CSV file')
@click.pass_context
def search(ctx, query, terms, content, regex, wildcard, whole_word, fuzzy, pdf, roots,
           include_ext, exclude_ext, since, min_size, max_size, exclude_dir, max_depth,
           trace_folders, snippet, max_results, json_output, list_output, csv_path):
    """Search file names and contents under the given roots"""
    all_terms: Tuple[str, ...] = ((query,) if query else ()) + terms
    all_terms = tuple(t for t in all_terms if t.strip())
    if not all_terms:
        raise click.UsageError("No search terms given; use --query or --term")

    mode = resolve_mode(regex, wildcard, whole_word)
    config = load_config(ctx.obj.get('config_file'))

    try:
        config = config.with_overrides({
            "search": {
                "mode": mode,
                "fuzzy": fuzzy,
                "content": content,
                "max_results": max_results,
            },
            "extraction": {"enable_pdf": pdf},
            "filters": {
                "include_extensions": split_csv_option(include_ext) or None,
                "exclude_extensions": split_csv_option(exclude_ext) or None,
                "exclude_dirs": split_csv_option(exclude_dir) or None,
                "max_depth": max_depth,
                "since": since,
                "min_size": min_size * 1024 if min_size is not None else None,
                "max_size": max_size * 1024 if max_size is not None else None,
                "trace_folders": trace_folders,
            },
            "output": {
                "show_snippet": snippet,
                "json_output": json_output,
                "list_output": list_output,
                "csv_path": csv_path,
            },
        })
    except ValueError as e:
        raise click.UsageError(str(e))

    if config.filters.trace_folders and not ctx.obj.get('verbose'):
        setup_logging('INFO', ctx.obj.get('log_file'))

    engine = SearchEngine(config)
    results = engine.run(list(roots) or [os.getcwd()], all_terms)

    output = config.output
    if output.csv_path:
        try:
            write_csv(results, output.csv_path, output.show_snippet)
        except OSError as e:
            raise click.ClickException(f"Cannot write CSV export {output.csv_path}: {e}")
        click.echo(f"Results exported to {output.csv_path}", err=True)

    if output.json_output:
        click.echo(render_json(results, output.show_snippet))
    elif not results:
        click.echo("No results found.")
    elif output.list_output:
        click.echo(render_list(results, output.show_snippet))
    else:
        click.echo(render_table(results, output.show_snippet))


@cli.command()
@click.option('--output', '-o', default='local_search_config.json', help='Output configuration file')
@click.pass_context
def init_config(ctx, output):
    """Initialize a configuration file with default settings"""
    config = Config()
    try:
        config.save_to_file(output)
    except OSError as e:
        raise click.ClickException(f"Cannot write configuration {output}: {e}")
    click.echo(f"Configuration file created: {output}")
    click.echo("Edit the file to customize settings, then use:")
    click.echo(f"  local-search --config {output} search -q <term>")


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
