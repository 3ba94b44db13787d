"""Command-line entry point for the company resolver."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from resolver.config.environment import EnvironmentConfig
from resolver.config.exceptions import ConfigurationError
from resolver.config.loader import load_config
from resolver.config.models import AppConfig
from resolver.domain.models import EntityKind
from resolver.logging import get_logger
from resolver.logging.config import configure_logging
from resolver.merging.service import RecordMerger
from resolver.persistence.database import close_database, init_database
from resolver.pipeline.runner import FallbackOrchestrator
from resolver.pipeline.web import WebSearchFallback
from resolver.providers.exceptions import ProviderConfigurationError
from resolver.providers.factory import (
    build_chat_completer,
    build_logo_downloader,
    build_logo_storage,
    build_web_search_client,
)
from resolver.search.exceptions import InputValidationError, RateLimitExceededError
from resolver.search.rate_limiter import SlidingWindowRateLimiter
from resolver.search.service import EntitySearchService

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_INPUT_ERROR = 2
EXIT_UNEXPECTED = 3


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def build_search_service(
    app_config: AppConfig, env_config: EnvironmentConfig, persist: bool
) -> EntitySearchService:
    """Wire collaborators, orchestrator and merger into a search service."""
    chat_completer = build_chat_completer(app_config, env_config)

    web_fallback = None
    search_client = build_web_search_client(app_config, env_config)
    if search_client is not None:
        web_fallback = WebSearchFallback(
            chat_completer=chat_completer,
            search_client=search_client,
            config=app_config.web_search,
        )

    orchestrator = FallbackOrchestrator(
        chat_completer=chat_completer,
        chain=app_config.fallback_chain,
        web_fallback=web_fallback,
    )

    rate_limiter = SlidingWindowRateLimiter(
        max_requests=app_config.rate_limit.max_requests,
        window_seconds=app_config.rate_limit.window_seconds,
    )

    merger = RecordMerger(logo_storage=build_logo_storage(env_config)) if persist else None

    return EntitySearchService(
        orchestrator=orchestrator,
        rate_limiter=rate_limiter,
        logo_downloader=build_logo_downloader(app_config),
        merger=merger,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Company Resolver - resolve a company or platform name into canonical records"
    )
    parser.add_argument("--query", required=True, help="Company or platform to resolve")
    parser.add_argument(
        "--kind",
        default=EntityKind.COMPANY.value,
        choices=[kind.value for kind in EntityKind],
        help="Entity kind to resolve (default: company)",
    )
    parser.add_argument(
        "--persist",
        action="store_true",
        help="Merge the results into the canonical store and print the stored records",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml when present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Resolve one query and print the results as JSON on stdout.

    Returns:
        Exit code: 0 success (including empty results), 1 configuration
        error, 2 invalid input or rate limit, 3 unexpected error.
    """
    start_time = time.time()
    args = parse_args(argv)
    database_initialized = False

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
        )

        logger.info(
            "Company Resolver starting",
            extra={
                "event": "service.starting",
                "kind": args.kind,
                "persist": args.persist,
                "web_search_enabled": env_config.web_search_enabled and app_config.web_search.enabled,
            },
        )

        if args.persist:
            init_database(env_config.database_url)
            database_initialized = True

        service = build_search_service(app_config, env_config, persist=args.persist)
        results = service.search(args.query, kind=EntityKind(args.kind), persist=args.persist)

        print(json.dumps([result.to_payload() for result in results], indent=2, ensure_ascii=False))

        logger.info(
            f"Resolved {len(results)} {args.kind} entities",
            extra={
                "event": "service.completed",
                "result_count": len(results),
                "duration_seconds": round(time.time() - start_time, 2),
            },
        )
        return EXIT_OK

    except (ConfigurationError, ProviderConfigurationError) as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except (InputValidationError, RateLimitExceededError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.warning(
            f"Search rejected: {e}",
            extra={"event": "service.search.rejected", "error_type": type(e).__name__},
        )
        return EXIT_INPUT_ERROR
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_UNEXPECTED
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during resolution",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return EXIT_UNEXPECTED
    finally:
        if database_initialized:
            close_database()


if __name__ == "__main__":
    sys.exit(main())
