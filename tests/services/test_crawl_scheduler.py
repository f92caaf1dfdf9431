from collections import Counter

import pytest

from linkcrawl.domain.crawl_config import CrawlConfig
from linkcrawl.exceptions import InvalidSeedUrl, SchedulerFailure
from linkcrawl.services.crawl_scheduler import CrawlScheduler
from linkcrawl.services.fetcher import RetryingFetcher
from linkcrawl.services.page_extractor import PageExtractor

SEED = "http://a.com"


def build(config, site, **kwargs):
    return CrawlScheduler(config, RetryingFetcher(site, config.fetch_max_retry), **kwargs)


def chain(html, length):
    """seed -> /1 -> /2 -> ... -> /length"""
    pages = {SEED: html("/1")}
    for i in range(1, length):
        pages[f"{SEED}/{i}"] = html(f"/{i + 1}")
    pages[f"{SEED}/{length}"] = html()
    return pages


def fan_out(html, width):
    """seed -> /1 .. /width, each child without links"""
    pages = {SEED: html(*[f"/{i}" for i in range(1, width + 1)])}
    for i in range(1, width + 1):
        pages[f"{SEED}/{i}"] = html()
    return pages


def test_same_origin_filters_seed_links(make_site, html):
    site = make_site({SEED: html("http://a.com/1", "http://b.com/2", "/3")})
    scheduler = build(CrawlConfig(url=SEED, max_request=1), site)

    result = scheduler.run()

    assert result.links_visited == 1
    assert list(scheduler.pending) == ["http://a.com/1", "http://a.com/3"]
    assert scheduler.pending.depth_of("http://a.com/1") == 1


def test_seed_rejected_by_pre_request_visits_nothing(make_site, html):
    site = make_site({SEED: html("/1"), f"{SEED}/1": html()})
    cfg = CrawlConfig(url=SEED, pre_request=lambda url: False if url == SEED else url)

    result = build(cfg, site).run()

    assert result.links_visited == 0
    assert site.calls == []


@pytest.mark.parametrize("seed", ["not a url", "/relative/path", "mailto:someone@a.com", "", None])
def test_invalid_seed_fails_before_any_fetch(make_site, seed):
    site = make_site({})
    with pytest.raises(InvalidSeedUrl):
        build(CrawlConfig(url=seed), site).run()
    assert site.calls == []


def test_seed_without_links_ends_crawl(make_site, html):
    site = make_site({SEED: html()})
    seen = []
    result = build(CrawlConfig(url=SEED, on_success=seen.append), site).run()
    assert result.links_visited == 0
    assert seen == []


def test_seed_is_evaluated_but_not_delivered(make_site, html):
    site = make_site({SEED: html("/1"), f"{SEED}/1": html()})
    evaluated = []
    seen = []

    def evaluate_page(doc):
        evaluated.append(len(doc.find_all("a")))
        return "ok"

    result = build(CrawlConfig(url=SEED, evaluate_page=evaluate_page, on_success=seen.append), site).run()

    assert sorted(evaluated) == [0, 1]
    assert [p.url for p in seen] == [f"{SEED}/1"]
    assert result.links_visited == 2


def test_seed_fetch_failure_ends_crawl_quietly(make_site):
    site = make_site({}, failing=[SEED])
    result = build(CrawlConfig(url=SEED), site).run()
    assert result.links_visited == 0
    assert site.attempts[SEED] == 3


def test_failing_link_does_not_affect_others(make_site, html):
    pages = {
        SEED: html("/1", "/2", "/3"),
        f"{SEED}/1": html("/4"),
        f"{SEED}/2": html("/6"),
        f"{SEED}/3": html("/5"),
        f"{SEED}/4": html(),
        f"{SEED}/5": html(),
        f"{SEED}/6": html(),
    }
    site = make_site(pages, failing=[f"{SEED}/2"])
    seen = []

    result = build(CrawlConfig(url=SEED, on_success=seen.append), site).run()

    assert site.attempts[f"{SEED}/2"] == 3
    assert f"{SEED}/6" not in site.fetched
    assert {p.url for p in seen} == {f"{SEED}/1", f"{SEED}/3", f"{SEED}/4", f"{SEED}/5"}
    assert result.links_visited == 6


def test_runs_are_deterministic_with_single_worker(make_site, html):
    pages = {
        SEED: html("/a", "/b", "http://b.com/x"),
        f"{SEED}/a": html("/c", "/b", "/d"),
        f"{SEED}/b": html("/a", "/e"),
        f"{SEED}/c": html("/"),
        f"{SEED}/d": html(),
        f"{SEED}/e": html("/f"),
        f"{SEED}/": html("/a"),
        f"{SEED}/f": html(),
    }
    runs = []
    for _ in range(2):
        seen = []
        result = build(CrawlConfig(url=SEED, parallel=1, on_success=seen.append), make_site(pages)).run()
        runs.append((result.links_visited, [p.url for p in seen]))
    assert runs[0] == runs[1]
    assert runs[0][0] == 8


def test_in_flight_never_exceeds_parallel(make_site, html):
    site = make_site(fan_out(html, 12), delay=0.02)
    observed = []
    scheduler = None

    def on_success(page):
        observed.append(len(scheduler.in_flight))

    scheduler = build(CrawlConfig(url=SEED, parallel=3, on_success=on_success), site)
    result = scheduler.run()

    assert result.links_visited == 13
    assert site.max_active <= 3
    assert max(observed) <= 3


@pytest.mark.parametrize("budget", [0, 1, 2, 5])
def test_request_budget_caps_visited_links(make_site, html, budget):
    site = make_site(fan_out(html, 10))
    result = build(CrawlConfig(url=SEED, max_request=budget), site).run()
    assert result.links_visited == budget
    assert len(site.fetched) == budget


def test_budget_exhaustion_lets_in_flight_pulls_finish(make_site, html):
    site = make_site(fan_out(html, 10), delay=0.01)
    seen = []
    result = build(CrawlConfig(url=SEED, max_request=4, parallel=3, on_success=seen.append), site).run()
    assert result.links_visited == 4
    assert len(seen) == 3


@pytest.mark.parametrize("max_depth,expected", [
    (0, {SEED}),
    (2, {SEED, f"{SEED}/1", f"{SEED}/2"}),
    (10, {SEED, f"{SEED}/1", f"{SEED}/2", f"{SEED}/3", f"{SEED}/4", f"{SEED}/5"}),
])
def test_max_depth_bounds_fetched_links(make_site, html, max_depth, expected):
    site = make_site(chain(html, 5))
    build(CrawlConfig(url=SEED, max_depth=max_depth), site).run()
    assert site.fetched == expected


def test_pending_and_visited_stay_disjoint(make_site, html):
    pages = {
        SEED: html("/1", "/2", "/3"),
        f"{SEED}/1": html("/2", "/3", "/4"),
        f"{SEED}/2": html("/1", "/4", "/5"),
        f"{SEED}/3": html(SEED, "/5"),
        f"{SEED}/4": html("/1"),
        f"{SEED}/5": html("/2"),
    }
    overlaps = []
    scheduler = None

    def on_success(page):
        overlaps.append(set(scheduler.pending) & set(scheduler.visited))

    scheduler = build(CrawlConfig(url=SEED, parallel=2, on_success=on_success), make_site(pages, delay=0.005))
    scheduler.run()

    assert overlaps
    assert all(not overlap for overlap in overlaps)
    assert len(scheduler.pending) == 0


def test_pre_request_runs_once_per_candidate_link(make_site, html):
    pages = {
        SEED: html("/1", "/2", "/1", "http://b.com/x"),
        f"{SEED}/1": html("/2"),
        f"{SEED}/2": html(),
    }
    calls = Counter()

    def pre_request(url):
        calls[url] += 1
        return url

    build(CrawlConfig(url=SEED, pre_request=pre_request), make_site(pages)).run()

    assert calls == Counter({SEED: 1, f"{SEED}/1": 1, f"{SEED}/2": 1})


def test_pre_request_rewrites_queued_links(make_site, html):
    pages = {SEED: html("/old", "/keep"), f"{SEED}/new": html(), f"{SEED}/keep": html()}
    site = make_site(pages)
    cfg = CrawlConfig(url=SEED, pre_request=lambda url: url.replace("/old", "/new"))

    scheduler = build(cfg, site)
    scheduler.run()

    assert f"{SEED}/new" in site.fetched
    assert f"{SEED}/old" not in site.fetched
    assert scheduler.visited.is_visited(f"{SEED}/new")


def test_rewritten_link_already_collected_is_not_requeued(make_site, html):
    pages = {SEED: html("/new", "/old"), f"{SEED}/new": html()}
    site = make_site(pages)
    cfg = CrawlConfig(url=SEED, pre_request=lambda url: url.replace("/old", "/new"))

    result = build(cfg, site).run()

    assert site.attempts[f"{SEED}/new"] == 1
    assert result.links_visited == 2


def test_pre_request_rejection_skips_link(make_site, html):
    site = make_site(fan_out(html, 3))
    cfg = CrawlConfig(url=SEED, pre_request=lambda url: False if url.endswith("/2") else url)
    build(cfg, site).run()
    assert site.fetched == {SEED, f"{SEED}/1", f"{SEED}/3"}


def test_broken_pre_request_uses_original_link(make_site, html):
    site = make_site(fan_out(html, 2))

    def pre_request(url):
        if url.endswith("/1"):
            raise RuntimeError("hook bug")
        return url

    result = build(CrawlConfig(url=SEED, pre_request=pre_request), site).run()
    assert result.links_visited == 3


def test_duplicates_are_followed_when_strict_skipping_is_off(make_site, html):
    pages = {SEED: html("/1"), f"{SEED}/1": html(SEED)}

    strict = make_site(pages)
    build(CrawlConfig(url=SEED), strict).run()
    assert strict.calls.count(SEED) == 1

    loose = make_site(pages)
    result = build(CrawlConfig(url=SEED, skip_strict_duplicates=False, parallel=1), loose).run()
    assert loose.calls == [SEED, f"{SEED}/1", SEED, f"{SEED}/1"]
    assert result.links_visited == 2


def test_cross_origin_links_followed_when_same_origin_is_off(make_site, html):
    pages = {SEED: html("http://b.com/x"), "http://b.com/x": html()}
    site = make_site(pages)
    build(CrawlConfig(url=SEED, same_origin=False), site).run()
    assert "http://b.com/x" in site.fetched


def test_evaluate_page_result_reaches_on_success(make_site, html):
    site = make_site(fan_out(html, 2))
    seen = {}

    def on_success(page):
        seen[page.url] = page.result

    cfg = CrawlConfig(url=SEED, evaluate_page=lambda doc: len(doc.find_all("a")), on_success=on_success)
    build(cfg, site).run()

    assert seen == {f"{SEED}/1": 0, f"{SEED}/2": 0}


def test_evaluate_page_failure_abandons_only_that_link(make_site, html):
    pages = fan_out(html, 3)
    pages[f"{SEED}/2"] = '<div id="broken"></div>' + html("/9")
    pages[f"{SEED}/9"] = html()
    site = make_site(pages)
    seen = []

    def evaluate_page(doc):
        if doc.find(id="broken") is not None:
            raise ValueError("cannot evaluate")
        return "ok"

    result = build(CrawlConfig(url=SEED, evaluate_page=evaluate_page, on_success=seen.append), site).run()

    assert f"{SEED}/9" not in site.fetched
    assert {p.url for p in seen} == {f"{SEED}/1", f"{SEED}/3"}
    assert result.links_visited == 4


class ExplodingExtractor(PageExtractor):
    def __init__(self, explode_on):
        super().__init__()
        self.explode_on = explode_on

    def extract_links(self, page, page_url):
        if page_url == self.explode_on:
            raise RuntimeError("extractor bug")
        return super().extract_links(page, page_url)


def test_unexpected_pull_error_aborts_crawl(make_site, html):
    site = make_site(fan_out(html, 3))
    scheduler = build(CrawlConfig(url=SEED, parallel=1), site, page_extractor=ExplodingExtractor(f"{SEED}/2"))

    with pytest.raises(SchedulerFailure) as excinfo:
        scheduler.run()

    assert excinfo.value.url == f"{SEED}/2"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert f"{SEED}/3" not in site.fetched
    assert len(scheduler.in_flight) == 0


def test_unexpected_seed_error_aborts_crawl(make_site, html):
    site = make_site(fan_out(html, 1))
    scheduler = build(CrawlConfig(url=SEED), site, page_extractor=ExplodingExtractor(SEED))
    with pytest.raises(SchedulerFailure):
        scheduler.run()
    assert site.calls == [SEED]


def test_result_timestamps(make_site, html):
    result = build(CrawlConfig(url=SEED), make_site(fan_out(html, 1))).run()
    assert result.started_at.tzinfo is not None
    assert result.finished_at >= result.started_at
