"""CLI for enriching category news articles."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from dotenv import load_dotenv

from common.cli_helpers import save_jsonl_local, setup_logging
from enrich_articles.config import ConfigError, get_config, load_api_keys, load_config, set_config
from enrich_articles.helpers import (
    build_enrichment_services,
    build_search_client,
    parse_enrich_articles_args,
)
from enrich_articles.pipeline import run_enrichment
from enrich_articles.timing import TimingRecorder

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    args = parse_enrich_articles_args(argv)
    setup_logging(args.log_level)

    try:
        set_config(load_config(args.config))
        config = get_config()
        api_keys = load_api_keys()
    except (ConfigError, FileNotFoundError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    recorder = TimingRecorder(args.timing_output or config.timing.output_path)
    records = run_enrichment(
        config,
        search_client=build_search_client(config, api_keys),
        services=build_enrichment_services(config, api_keys),
        recorder=recorder,
    )

    if args.load_local and records:
        filepath = save_jsonl_local(
            [record.to_payload() for record in records],
            "enriched_articles",
            datetime.now(timezone.utc),
        )
        logger.info("Saved %d enriched articles to %s", len(records), filepath)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
