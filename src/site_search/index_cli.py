"""CLI for building the search index artifact."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

import orjson
from pydantic import ValidationError

from site_search.adapters.content_source import FilesystemContentSource
from site_search.config import Settings
from site_search.domain.search import ContentType
from site_search.search.indexer import IndexBuildResult, SearchIndexer
from site_search.search.storage import IndexArtifactError, IndexArtifactStore


logger = logging.getLogger(__name__)


def build_argument_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build the site search index from Markdown/MDX content",
    )
    parser.add_argument(
        "--content-root",
        type=Path,
        default=settings.content_root,
        help=f"Root of the content tree (default: {settings.content_root})",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=settings.search_index_path,
        help=f"Index artifact to write (default: {settings.search_index_path})",
    )
    parser.add_argument(
        "--type",
        dest="content_types",
        nargs="+",
        choices=[content_type.value for content_type in ContentType],
        default=[content_type.value for content_type in settings.get_content_types()],
        metavar="TYPE",
        help="Content types to index (default: %(default)s)",
    )
    parser.add_argument(
        "--max-content-length",
        type=int,
        default=settings.search_max_content_length,
        help="Maximum cleaned body characters kept per document (default: %(default)s)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the documents without writing the artifact",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary of the build to stdout",
    )
    return parser


def _configure_logging() -> None:
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=logging.INFO, format="%(message)s")


def _summary(result: IndexBuildResult) -> dict[str, object]:
    return {
        "documents_indexed": result.documents_indexed,
        "documents_skipped": result.documents_skipped,
        "by_type": result.counts_by_type(),
        "errors": result.errors,
        "artifact_path": str(result.artifact_path) if result.artifact_path else None,
    }


def main(argv: Sequence[str] | None = None) -> int:
    _configure_logging()

    try:
        settings = Settings()
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    parser = build_argument_parser(settings)
    args = parser.parse_args(argv)

    if args.max_content_length < 1:
        parser.error("--max-content-length must be >= 1")

    content_root = args.content_root.expanduser()
    if not content_root.is_dir():
        logger.error("Content root does not exist: %s", content_root)
        return 1

    indexer = SearchIndexer(
        FilesystemContentSource(content_root),
        IndexArtifactStore(args.output.expanduser()),
        max_content_length=args.max_content_length,
    )

    try:
        result = indexer.build(args.content_types, persist=not args.dry_run)
    except IndexArtifactError as exc:
        logger.error("%s", exc)
        return 1

    counts = result.counts_by_type()
    logger.info(
        "Found %d blog posts and %d docs (%d drafts skipped)",
        counts.get(ContentType.BLOG.value, 0),
        counts.get(ContentType.DOCS.value, 0),
        result.documents_skipped,
    )
    if result.errors:
        logger.warning("%d item(s) could not be indexed", len(result.errors))
    if result.artifact_path is not None:
        logger.info("Search index written to %s", result.artifact_path)
    else:
        logger.info("Dry run: artifact not written")

    if args.json:
        sys.stdout.write(orjson.dumps(_summary(result), option=orjson.OPT_SORT_KEYS).decode("utf-8") + "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
