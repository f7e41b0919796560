"""Tests for the query interpreter."""

import pytest

from shlinkrun.exceptions import InvalidUrl
from shlinkrun.interpreter import (
    ERROR_ICON,
    USAGE,
    QueryTerms,
    interpret,
    is_absolute_url,
    looks_like_url,
    parse_terms,
)
from shlinkrun.settings import ShlinkSettings
from shlinkrun.types import Query


class Recorder:
    """``on_select`` stand-in that records what it was called with."""

    def __init__(self, outcome=True):
        self.outcome = outcome
        self.calls = []

    def __call__(self, request, instance):
        self.calls.append((request, instance))
        return self.outcome


def keyword_query(text):
    return Query.parse(f"sl {text}", "sl")


# ── URL checks ────────────────────────────────────────────────────────────


class TestUrlChecks:
    @pytest.mark.parametrize("text", ["https://example.com", "ftp://files/x", "foo://bar"])
    def test_looks_like_url(self, text):
        assert looks_like_url(text) is True

    @pytest.mark.parametrize("text", ["example.com", "https://", "https://a b", "hello world", ""])
    def test_does_not_look_like_url(self, text):
        assert looks_like_url(text) is False

    @pytest.mark.parametrize("text", ["https://example.com/path?q=1", "mailto:me@example.com", "http://localhost:8080"])
    def test_absolute(self, text):
        assert is_absolute_url(text) is True

    @pytest.mark.parametrize("text", ["example.com", "/relative/path", "http://", "http://[::1", "1http://x", "http://host:abc", "http://host:99999"])
    def test_not_absolute(self, text):
        assert is_absolute_url(text) is False


# ── parse_terms ───────────────────────────────────────────────────────────


class TestParseTerms:
    def test_url_only(self):
        assert parse_terms(["https://example.com"]) == QueryTerms(url="https://example.com")

    def test_two_terms_are_url_and_shortcode(self):
        terms = parse_terms(["https://example.com", "mytitle"])
        assert terms.shortcode == "mytitle"
        assert terms.title is None

    def test_three_terms(self):
        terms = parse_terms(["https://example.com", "mycode", "mytitle"])
        assert terms.shortcode == "mycode"
        assert terms.title == "mytitle"

    def test_four_terms_drop_title(self):
        terms = parse_terms(["https://example.com", "mycode", "my", "title"])
        assert terms.shortcode == "mycode"
        assert terms.title is None

    def test_invalid_url(self):
        with pytest.raises(InvalidUrl) as exc_info:
            parse_terms(["example.com", "code"])
        assert exc_info.value.value == "example.com"

    def test_descriptions(self):
        assert QueryTerms("u").description == "With a randomly generated shortcode"
        assert QueryTerms("u", "c").description == "With shortcode: c"
        assert QueryTerms("u", "c", "t").description == "With shortcode: c and title: t"


# ── Global matching ───────────────────────────────────────────────────────


class TestGlobalMatching:
    def test_declines_non_url(self, one_instance):
        assert interpret(Query.parse("hello world"), one_instance, Recorder()) == []

    def test_declines_url_with_extra_terms(self, one_instance):
        assert interpret(Query.parse("https://example.com code"), one_instance, Recorder()) == []

    def test_declines_empty_text(self, one_instance):
        assert interpret(Query.parse(""), one_instance, Recorder()) == []

    def test_accepts_whole_text_url(self, one_instance):
        results = interpret(Query.parse("https://example.com"), one_instance, Recorder())
        assert len(results) == 1
        assert results[0].actionable
        request, _ = results[0].context_data
        assert request.long_url == "https://example.com"
        assert request.custom_slug is None


# ── Hint and error rows ───────────────────────────────────────────────────


class TestHintAndErrors:
    def test_usage_hint(self, one_instance):
        results = interpret(Query.parse("sl", "sl"), one_instance, Recorder(), icon_path="icon.png")
        assert len(results) == 1
        hint = results[0]
        assert hint.title == "Create a short url"
        assert hint.query_text_display == USAGE
        assert hint.icon_path == "icon.png"
        assert not hint.actionable
        assert hint.invoke() is False

    def test_usage_hint_ignores_configuration(self):
        results = interpret(Query.parse("sl", "sl"), ShlinkSettings(), Recorder())
        assert len(results) == 1
        assert results[0].title == "Create a short url"

    def test_invalid_url(self, one_instance):
        recorder = Recorder()
        results = interpret(keyword_query("not-a-url mycode"), one_instance, recorder)
        assert len(results) == 1
        assert results[0].sub_title == "Please enter a valid url"
        assert results[0].icon_path == ERROR_ICON
        assert results[0].query_text_display == "not-a-url mycode"
        assert not results[0].actionable

    def test_bad_port_is_invalid(self, one_instance):
        recorder = Recorder()
        results = interpret(keyword_query("https://example.com:abc"), one_instance, recorder)
        assert [r.sub_title for r in results] == ["Please enter a valid url"]
        assert not results[0].actionable

    def test_invalid_url_checked_before_configuration(self):
        results = interpret(keyword_query("nope"), ShlinkSettings(), Recorder())
        assert results[0].sub_title == "Please enter a valid url"

    def test_no_instances(self):
        results = interpret(keyword_query("https://example.com"), ShlinkSettings(keys="K"), Recorder())
        assert len(results) == 1
        assert results[0].title == "No Shlink instances configured"
        assert results[0].icon_path == ERROR_ICON

    @pytest.mark.parametrize("hosts,keys", [
        ("https://a.io", ""),
        ("https://a.io\rhttps://b.io", "K1"),
        ("https://a.io", "K1\rK2\rK3"),
    ])
    def test_mismatched_hosts_and_keys(self, hosts, keys):
        settings = ShlinkSettings(hosts=hosts, keys=keys)
        results = interpret(keyword_query("https://example.com"), settings, Recorder())
        assert len(results) == 1
        assert results[0].title == "Mismatched number of hosts and keys"
        assert not results[0].actionable


# ── Instance fan-out ──────────────────────────────────────────────────────


class TestFanOut:
    def test_one_result_per_instance(self, two_instances):
        results = interpret(keyword_query("https://example.com"), two_instances, Recorder())
        assert [r.title for r in results] == [
            "Create a short url with s.io",
            "Create a short url with short.example.org",
        ]
        assert all(r.sub_title == "With a randomly generated shortcode" for r in results)

    def test_distinct_pairs(self):
        hosts = [f"https://s{i}.io" for i in range(5)]
        keys = [f"K{i}" for i in range(5)]
        settings = ShlinkSettings(hosts="\r".join(hosts), keys="\r".join(keys))
        results = interpret(keyword_query("https://example.com"), settings, Recorder())
        pairs = [(inst.host, inst.api_key) for _, inst in (r.context_data for r in results)]
        assert pairs == list(zip(hosts, keys))

    def test_action_calls_on_select(self, two_instances):
        recorder = Recorder(outcome=True)
        results = interpret(keyword_query("https://example.com mycode mytitle"), two_instances, recorder)
        assert results[1].invoke() is True
        request, instance = recorder.calls[0]
        assert instance.host == "https://short.example.org/"
        assert instance.api_key == "K2"
        assert request.custom_slug == "mycode"
        assert request.title == "mytitle"
        assert request.tags == ["launcher", "work"]

    def test_action_outcome_is_returned(self, one_instance):
        results = interpret(keyword_query("https://example.com"), one_instance, Recorder(outcome=False))
        assert results[0].invoke() is False

    def test_subtitle_with_shortcode_and_title(self, one_instance):
        results = interpret(keyword_query("https://example.com mycode mytitle"), one_instance, Recorder())
        assert results[0].sub_title == "With shortcode: mycode and title: mytitle"

    def test_subtitle_with_shortcode(self, one_instance):
        results = interpret(keyword_query("https://example.com mycode"), one_instance, Recorder())
        assert results[0].sub_title == "With shortcode: mycode"

    def test_nothing_dispatched_while_querying(self, two_instances):
        recorder = Recorder()
        interpret(keyword_query("https://example.com"), two_instances, recorder)
        assert recorder.calls == []
