"""
Command-line interface for the crawler.
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from linkcrawler.crawler import Crawler, CrawlStats
from linkcrawler.errors import FrontierEmpty, RequestFailed, SnapshotError, UrlParseError
from linkcrawler.fetch import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT, HttpFetcher
from linkcrawler.state import load_state, save_state

DEFAULT_STEPS = 10
DEFAULT_STATE_PATH = "crawler.json"


def print_progress(step: int, steps: int, explored: int, queue_size: int) -> None:
    """Print real-time progress to stderr."""
    # Clear line and print progress
    progress = f"\r\033[K[{step}/{steps}] Explored: {explored} | Queue: {queue_size}"
    sys.stderr.write(progress)
    sys.stderr.flush()


def print_step_line(url: str, new_links: Optional[int]) -> None:
    """Print single visit result line; None means the fetch failed."""
    if new_links is None:
        sys.stderr.write(f"\n  ✗ ERROR {url}")
    else:
        sys.stderr.write(f"\n  → {url} (+{new_links} links)")
    sys.stderr.flush()


def print_summary(stats: CrawlStats, explored: int, queue_size: int) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write("CRAWL SUMMARY\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Pages visited this run:  {stats.pages_visited}\n")
    sys.stderr.write(f"Known pages skipped:     {stats.pages_skipped}\n")
    sys.stderr.write(f"Links discovered:        {stats.links_discovered}\n")
    sys.stderr.write(f"Frontier size:           {queue_size}\n")
    sys.stderr.write(f"Total explored nodes:    {explored}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            if error_type == "connection_error":
                label = "Connection errors"
            elif error_type == "non_text":
                label = "Non-text responses"
            elif error_type == "invalid_url":
                label = "Invalid URLs"
            elif error_type == "unexpected_error":
                label = "Unexpected fetch errors"
            else:
                label = f"HTTP {error_type}"
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    sys.stderr.write("\n")


def run(
    crawler: Crawler,
    steps: int,
    concurrency: int = 1,
    skip_if_known: bool = True,
    fail_fast: bool = False,
    verbose: bool = False,
) -> bool:
    """
    Drive the crawler for a bounded number of steps.

    Returns False if the run was aborted by a failed request in fail-fast
    mode, True otherwise (including when the frontier runs dry).
    """
    for i in range(steps):
        if verbose:
            print_progress(i, steps, crawler.explored_count(), len(crawler.frontier))
        try:
            if concurrency > 1:
                batch = crawler.step_concurrent(concurrency)
                if verbose:
                    for visit in batch.visits:
                        print_step_line(visit.url, len(visit.links))
                    for url in batch.failed:
                        print_step_line(url, None)
            else:
                visit = crawler.step(skip_if_known=skip_if_known)
                if verbose and visit is not None:
                    print_step_line(visit.url, len(visit.links))
        except FrontierEmpty:
            if verbose:
                sys.stderr.write("\n  Frontier is empty, stopping.")
            break
        except (RequestFailed, UrlParseError) as e:
            if verbose:
                sys.stderr.write(f"\n  ✗ ERROR {e}: {e.__cause__ or ''}")
            if fail_fast:
                return False

    if verbose:
        sys.stderr.write("\n\n")
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    parser = argparse.ArgumentParser(
        description="Breadth-first crawl from a URL, recording the link graph in a resumable snapshot."
    )
    parser.add_argument("start_url", help="Seed URL used when no snapshot exists (e.g. https://example.com)")
    parser.add_argument("--steps", type=int, default=DEFAULT_STEPS, help=f"Number of crawl steps (default: {DEFAULT_STEPS})")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=1,
        help="URLs fetched in parallel per step; 1 visits one URL at a time (default: 1)",
    )
    parser.add_argument("--revisit", action="store_true", help="Fetch URLs again even if already explored")
    parser.add_argument("--state", default=DEFAULT_STATE_PATH, help=f"Snapshot file (default: {DEFAULT_STATE_PATH})")
    parser.add_argument("--fresh", action="store_true", help="Ignore an existing snapshot and start over")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S, help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT_S:g})")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--fail-fast", action="store_true", help="Stop on the first failed request")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print the snapshot JSON")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    args = parser.parse_args(argv)

    if args.steps < 0:
        parser.error("--steps must not be negative")
    if args.concurrency < 1:
        parser.error("--concurrency must be at least 1")

    fetcher = HttpFetcher(timeout_s=args.timeout, user_agent=args.user_agent)
    try:
        state = None if args.fresh else load_state(args.state)
        if state is not None:
            crawler = Crawler(fetcher, state)
            if args.verbose:
                sys.stderr.write(f"Resuming from: {args.state}\n")
        else:
            crawler = Crawler.new([args.start_url], fetcher)
            if args.verbose:
                sys.stderr.write(f"Starting crawl from: {args.start_url}\n")
    except (SnapshotError, UrlParseError) as e:
        sys.stderr.write(f"Error: {e}\n")
        fetcher.close()
        return 2

    try:
        completed = run(
            crawler,
            steps=args.steps,
            concurrency=args.concurrency,
            skip_if_known=not args.revisit,
            fail_fast=args.fail_fast,
            verbose=args.verbose,
        )
    finally:
        fetcher.close()
        output_path = save_state(crawler.state, args.state, pretty=args.pretty)

    if args.verbose:
        print_summary(crawler.stats, crawler.explored_count(), len(crawler.frontier))
        sys.stderr.write(f"State written to: {output_path}\n")
    sys.stderr.write(f"Explored nodes: {crawler.explored_count()}\n")

    return 0 if completed else 1


if __name__ == "__main__":
    raise SystemExit(main())
