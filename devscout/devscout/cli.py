#!/usr/bin/env python3
"""devscout CLI - Discover and enrich developer profiles."""

import asyncio
import json
from typing import Callable

import click
import httpx

from .config import Config, DiscoveryConfig, load_config
from .crm import FolkClient
from .db import DeveloperStore, get_supabase
from .enrichers.cascade import DiscoveryCascade, default_resolvers, validate_batch
from .enrichers.extractor import StructuredExtractor
from .enrichers.github import GitHubClient
from .enrichers.serp import SerperClient
from .enrichers.sixtyfour import SixtyFourClient
from .enrichers.website import WebsiteCrawler
from .enrichers.writer import MultiSinkWriter
from .errors import BatchValidationError, DevscoutError
from .llm import LLMClient
from .logging_setup import init_logging
from .scrapers import BrowserbaseClient, LinkedInProfileScraper
from .workers import BaseFlow, CollectFlow, DiscoveryFlow, LinkedInEnrichFlow, ReEnrichFlow, SubmitFlow


FlowBuilder = Callable[[Config, httpx.AsyncClient, DeveloperStore, MultiSinkWriter], BaseFlow]


# ========== Flow builders ==========

def build_discovery(config: Config, http: httpx.AsyncClient, store: DeveloperStore, writer: MultiSinkWriter) -> BaseFlow:
    resolvers = default_resolvers(
        GitHubClient(config.github, http),
        SerperClient(config.serper, http),
        WebsiteCrawler(http),
        config.discovery,
    )
    return DiscoveryFlow(store, DiscoveryCascade(resolvers), writer)


def build_submit(config: Config, http: httpx.AsyncClient, store: DeveloperStore, writer: MultiSinkWriter) -> BaseFlow:
    return SubmitFlow(store, SixtyFourClient(config.sixtyfour, http))


def build_collect(config: Config, http: httpx.AsyncClient, store: DeveloperStore, writer: MultiSinkWriter) -> BaseFlow:
    return CollectFlow(store, SixtyFourClient(config.sixtyfour, http), writer)


def build_re_enrich(config: Config, http: httpx.AsyncClient, store: DeveloperStore, writer: MultiSinkWriter) -> BaseFlow:
    return ReEnrichFlow(
        store,
        GitHubClient(config.github, http),
        SerperClient(config.serper, http),
        StructuredExtractor(LLMClient(config.anthropic)),
        writer,
        llm_timeout=config.discovery.llm_timeout_seconds,
    )


def build_linkedin(config: Config, http: httpx.AsyncClient, store: DeveloperStore, writer: MultiSinkWriter) -> BaseFlow:
    scraper = LinkedInProfileScraper(
        BrowserbaseClient(config.browserbase, http),
        config.linkedin,
        timeout=config.discovery.scrape_timeout_seconds,
    )
    return LinkedInEnrichFlow(
        store,
        scraper,
        StructuredExtractor(LLMClient(config.anthropic)),
        writer,
        delay_seconds=config.linkedin.scrape_delay_seconds,
        llm_timeout=config.discovery.llm_timeout_seconds,
    )


async def run_flow(build: FlowBuilder, identity_ids: list[str] | None) -> dict:
    config = load_config()
    init_logging(config.log_level)

    async with httpx.AsyncClient(timeout=config.discovery.api_timeout_seconds) as http:
        store = DeveloperStore(await get_supabase(config.supabase))
        crm = FolkClient(config.folk, http) if config.folk.api_key else None
        flow = build(config, http, store, MultiSinkWriter(store, crm))
        flow.max_batch_size = config.discovery.max_batch_size
        return await flow.run(identity_ids)


def execute(build: FlowBuilder, identity_ids: tuple[str, ...] | None):
    """Run a flow and print its JSON response. Batch errors exit with status 2."""
    ids = list(identity_ids) if identity_ids is not None else None
    try:
        if ids is not None:
            validate_batch(ids, DiscoveryConfig().max_batch_size)
        response = asyncio.run(run_flow(build, ids))
    except BatchValidationError as e:
        click.echo(json.dumps({"error": str(e)}), err=True)
        raise click.exceptions.Exit(2)
    except DevscoutError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(response, indent=2, default=str))


# ========== Commands ==========

@click.group()
def cli():
    """devscout - Find GitHub handles and enrich developer profiles."""
    pass


@cli.command()
@click.argument("identity_ids", nargs=-1)
def discover(identity_ids: tuple[str, ...]):
    """Find GitHub profiles through the discovery cascade."""
    execute(build_discovery, identity_ids)


@cli.command()
@click.argument("identity_ids", nargs=-1)
def submit(identity_ids: tuple[str, ...]):
    """Submit developers to SixtyFour for async enrichment."""
    execute(build_submit, identity_ids)


@cli.command()
def collect():
    """Collect results of outstanding SixtyFour tasks."""
    execute(build_collect, None)


@cli.command("re-enrich")
@click.argument("identity_ids", nargs=-1)
def re_enrich(identity_ids: tuple[str, ...]):
    """Rebuild profiles from GitHub and web search (overwrites)."""
    execute(build_re_enrich, identity_ids)


@cli.command("linkedin-enrich")
@click.argument("identity_ids", nargs=-1)
def linkedin_enrich(identity_ids: tuple[str, ...]):
    """Fill empty profile fields from LinkedIn."""
    execute(build_linkedin, identity_ids)


if __name__ == "__main__":
    cli()
