import argparse
import logging
import sys

from linkcrawl import config as env
from linkcrawl.container import Container
from linkcrawl.exceptions import FatalCrawlError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crawl links from a seed URL and print every page reached from it."
    )
    parser.add_argument("url", nargs="?", help="Seed URL (e.g. https://example.com)")
    parser.add_argument("--config", help="YAML file with crawl options; flags below override it")
    parser.add_argument("--max-request", type=int, help="Maximum links to visit, -1 for no limit (default: -1)")
    parser.add_argument("--max-depth", type=int, help="Maximum link-follow depth from the seed (default: 3)")
    parser.add_argument("--parallel", type=int, help="Maximum concurrent fetches (default: 5)")
    parser.add_argument("--fetch-max-retry", type=int, help="Retries per failed fetch (default: FETCH_MAX_RETRY or 2)")
    parser.add_argument("--allow-cross-origin", action="store_true", help="Follow links to other origins")
    parser.add_argument("--allow-duplicates", action="store_true", help="Re-queue links that were already seen")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LINKCRAWL_LOG_LEVEL or INFO)")
    return parser


def print_page(page) -> None:
    print(page.url, flush=True)


def main(argv=None, container: Container = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=(args.log_level or env.log_level()).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    container = container or Container()

    data = {}
    if args.config:
        data = container.config_file_store().load_yaml_dict(args.config)
        if data is None:
            sys.stderr.write(f"Could not load config file: {args.config}\n")
            return 2

    overrides = {
        "url": args.url,
        "max_request": args.max_request,
        "max_depth": args.max_depth,
        "parallel": args.parallel,
        "fetch_max_retry": args.fetch_max_retry,
    }
    if args.allow_cross_origin:
        overrides["same_origin"] = False
    if args.allow_duplicates:
        overrides["skip_strict_duplicates"] = False
    if "fetch_max_retry" not in data and "fetchMaxRetry" not in data and args.fetch_max_retry is None:
        overrides["fetch_max_retry"] = container.config.FETCH_MAX_RETRY()

    try:
        crawl_config = container.config_parser().parse(data, hooks={"on_success": print_page}, **overrides)
    except ValueError as e:
        sys.stderr.write(f"Invalid crawl options: {e}\n")
        return 2

    try:
        result = container.crawler(crawl_config).init()
    except FatalCrawlError as e:
        logging.getLogger("linkcrawl").error("Crawl failed: %s", e)
        return 1

    elapsed = (result.finished_at - result.started_at).total_seconds()
    sys.stderr.write(f"Visited {result.links_visited} links in {elapsed:.1f}s\n")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
