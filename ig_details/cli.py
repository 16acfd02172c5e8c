from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

from .collaborators import OutputSink
from .config import config_sha256, load_config, resolve_runtime_secrets
from .config_schema import AppConfig
from .details import scrape_details
from .errors import (
    ConfigError,
    NotAProfilePage,
    OutputError,
    PagePayloadMissing,
    PublicStoryLookupFailed,
    UnsupportedPageType,
)
from .offline import OfflineAuxiliaryQuery, OfflineConnectionsFetcher, load_json_file
from .page_types import PageType
from .request_debug import ItemSpec, ScrapeRequest
from .run_log import RunLogger
from .sinks import ApifyDatasetSink, JsonlOutputSink

_SCRAPE_ERRORS = (
    UnsupportedPageType,
    PagePayloadMissing,
    NotAProfilePage,
    PublicStoryLookupFailed,
    OutputError,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ig_details")

    subparsers = parser.add_subparsers(dest="command", required=True)

    fmt = subparsers.add_parser(
        "format",
        help="Format a saved page payload into a details record.",
    )
    fmt.add_argument("--config", required=True, help="Path to YAML config file.")
    fmt.add_argument(
        "--page-type",
        required=True,
        type=str.upper,
        help="Page classification: place, profile, hashtag or post.",
    )
    fmt.add_argument(
        "--input",
        required=True,
        help="JSON file with the page's shared data (must contain entry_data).",
    )
    fmt.add_argument("--out", required=True, help="Output directory for records and logs.")
    fmt.add_argument("--url", default=None, help="URL the payload was loaded from.")
    fmt.add_argument(
        "--connections",
        default=None,
        help="JSON file with following/followedBy/likedBy lists.",
    )
    fmt.add_argument(
        "--stories",
        default=None,
        help="JSON file with the public-story query response.",
    )
    fmt.set_defaults(_handler=_cmd_format)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _build_sink(cfg: AppConfig, out_dir: Path) -> OutputSink:
    if cfg.apify.dataset_id:
        secrets = resolve_runtime_secrets(cfg)
        return ApifyDatasetSink(secrets.apify_token, cfg.apify.dataset_id)
    return JsonlOutputSink(out_dir / "details.jsonl")


def _cmd_format(args: argparse.Namespace) -> int:
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    log_path = out_dir / "run.log"
    with RunLogger.open(log_path, overwrite=True) as log:
        try:
            cfg = load_config(args.config)
            log.info(
                "config_loaded",
                config_path=str(args.config),
                config_hash=config_sha256(cfg),
            )

            data = load_json_file(args.input)
            if not isinstance(data, Mapping) or "entry_data" not in data:
                raise ConfigError(f"Input {args.input} must be a JSON object with entry_data")

            connections = (
                OfflineConnectionsFetcher.from_file(args.connections)
                if args.connections
                else OfflineConnectionsFetcher()
            )
            stories: Any = load_json_file(args.stories) if args.stories else None

            page_type: PageType | str = PageType.parse(args.page_type) or args.page_type
            url = (args.url or "").strip() or str(Path(args.input).resolve())
            request = ScrapeRequest(url=url, loaded_url=url, user_data={"pageType": str(args.page_type)})
            item_spec = ItemSpec(page_type=page_type, url=url)
            sink = _build_sink(cfg, out_dir)

            output = asyncio.run(
                scrape_details(
                    config=cfg,
                    request=request,
                    item_spec=item_spec,
                    data=data,
                    page=None,
                    connections=connections,
                    sink=sink,
                    aux_query=OfflineAuxiliaryQuery(stories),
                    logger=log,
                )
            )
        except Exception as e:
            log.exception("format_command_failed", exc=e)
            raise

    print(f"page_type={args.page_type}")
    print(f"id={output.get('id')}")
    if isinstance(sink, JsonlOutputSink):
        print(f"output={sink.path}")
    else:
        print(f"output=apify:{cfg.apify.dataset_id}")
    print(f"run_log={log_path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except ConfigError as e:
        _eprint(str(e))
        return 2
    except _SCRAPE_ERRORS as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
