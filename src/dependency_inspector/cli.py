from __future__ import annotations

import logging
from pathlib import Path

import typer

from inspector_core import AuditorConfig, CrawlerConfig, load_registry
from inspector_core.github import CrawlAbortedError, GitHubClient, LockfileCrawler
from inspector_core.lockfile import (
    analyze_dependencies,
    find_lock_files,
    list_remotes,
    resolve_ecosystem,
)
from inspector_core.retry import RetryPolicy
from inspector_core.rubygems import RegistryAuditor, RubyGemsClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = typer.Typer(
    help="Dependency Inspector CLI: crawl, audit and analyze lockfiles.",
    no_args_is_help=True,
)


@app.command("fetch-lockfiles")
def fetch_lockfiles(
    filename: str | None = typer.Argument(
        None,
        help="File to fetch from every repository, e.g. Gemfile.lock.",
        show_default=False,
    ),
) -> None:
    """Fetch FILENAME from every non-archived repository of $ORG into input/.

    Reads the access token from $PAT and the organization from $ORG. Set
    $PUBLIC_REPO=true to only crawl public repositories. Repositories whose
    lockfile is already in input/ are skipped.
    """
    try:
        config = CrawlerConfig.from_env(filename)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    client = GitHubClient(
        access_token=config.access_token,
        api_base_url=config.api_base_url,
        timeout_seconds=config.timeout_seconds,
    )
    crawler = LockfileCrawler(config=config, client=client, retry_policy=RetryPolicy())
    try:
        stats = crawler.run()
    except CrawlAbortedError as exc:
        typer.echo(f"An error occurred: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(
        f"fetched={stats.fetched} cached={stats.skipped_cached} "
        f"archived={stats.skipped_archived} not_found={stats.not_found} "
        f"failed={stats.failed} rate_limited={stats.rate_limited}"
    )


@app.command("public-gems")
def public_gems(
    registry_path: Path = typer.Argument(
        Path("registry.json"),
        help="JSON file whose 'dependencies' lists the gems to check.",
    ),
    author_pattern: str = typer.Option(
        "acme",
        "--author-pattern",
        help="Case-insensitive regex that marks a gem author as our organization.",
    ),
) -> None:
    """Check which private registry gems are claimed on rubygems.org, and by whom."""
    try:
        config = AuditorConfig(registry_path=registry_path, author_pattern=author_pattern)
        registry = load_registry(config.registry_path)
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    client = RubyGemsClient(
        api_base_url=config.api_base_url,
        timeout_seconds=config.timeout_seconds,
    )
    auditor = RegistryAuditor(config=config, client=client, progress=typer.echo)
    report = auditor.audit(registry.dependencies)
    for line in report.summary_lines():
        typer.echo(line)


@app.command("remotes")
def remotes(
    path: Path = typer.Option(
        ...,
        "--path",
        help="A .lock file or a directory containing .lock files.",
    ),
    grep: str = typer.Option(
        "",
        "--grep",
        help="Only keep remote URLs containing this substring (case-insensitive).",
    ),
    ruby: bool = typer.Option(False, "--ruby", help="Parse Gemfile.lock files."),
    js: bool = typer.Option(False, "--js", help="Parse yarn.lock files."),
    verbose: bool = typer.Option(False, "--verbose", help="Log the remotes parsed per file."),
    output_dir: Path = typer.Option(
        Path("remotes_output"),
        "--output-dir",
        help="Directory for remotes.json.",
    ),
) -> None:
    """List every remote found in .lock files."""
    try:
        ecosystem = resolve_ecosystem(ruby=ruby, js=js)
        lock_files = find_lock_files(path)
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    remote_urls, output_path = list_remotes(
        lock_files,
        ecosystem=ecosystem,
        output_dir=output_dir,
        grep=grep,
        verbose=verbose,
    )
    typer.echo(f"remotes={len(remote_urls)} files={len(lock_files)} json_out={output_path}")


@app.command("analyze")
def analyze(
    path: Path = typer.Option(
        ...,
        "--path",
        help="A .lock file or a directory containing .lock files.",
    ),
    registry_path: Path = typer.Option(
        Path("registry.json"),
        "--registry",
        help="Private registry file in JSON format.",
    ),
    ruby: bool = typer.Option(False, "--ruby", help="Analyze Gemfile.lock files."),
    js: bool = typer.Option(False, "--js", help="Analyze yarn.lock files."),
    verbose: bool = typer.Option(False, "--verbose", help="Log the remotes parsed per file."),
    output_dir: Path = typer.Option(
        Path("analyze_output"),
        "--output-dir",
        help="Directory for <lockfile>_output.json reports.",
    ),
) -> None:
    """Find private registry dependencies resolved from another remote."""
    try:
        ecosystem = resolve_ecosystem(ruby=ruby, js=js)
        lock_files = find_lock_files(path)
        registry = load_registry(registry_path)
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    result = analyze_dependencies(
        lock_files,
        registry=registry,
        ecosystem=ecosystem,
        output_dir=output_dir,
        verbose=verbose,
    )
    for lock_path in result.mismatches:
        typer.echo(f"Dependency mismatches found for {lock_path}")
    typer.echo(
        f"files={len(result.parsed)} mismatched={len(result.mismatches)} "
        f"skipped={len(result.skipped)}"
    )


def main() -> None:
    """CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
