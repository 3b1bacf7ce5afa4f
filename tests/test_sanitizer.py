"""Tests for URL normalisation and tracking-parameter stripping.

Everything here is pure: no network, no mocking.
"""

from __future__ import annotations

import pytest

from purl.errors import InvalidUrlError
from purl.sanitizer import is_tracking_param, sanitize_url, strip_tracking_params


# ---------------------------------------------------------------------------
# Scheme defaulting
# ---------------------------------------------------------------------------

class TestSchemeDefaulting:
    def test_bare_host_gets_https(self) -> None:
        assert sanitize_url("wttr.in") == "https://wttr.in/"

    def test_bare_host_with_path(self) -> None:
        assert sanitize_url("wttr.in/London") == "https://wttr.in/London"

    def test_http_is_kept(self) -> None:
        assert sanitize_url("http://example.com/a") == "http://example.com/a"

    def test_https_is_kept(self) -> None:
        assert sanitize_url("https://example.com/a") == "https://example.com/a"

    def test_uppercase_scheme_not_doubled(self) -> None:
        assert sanitize_url("HTTPS://example.com/") == "https://example.com/"

    def test_surrounding_whitespace_ignored(self) -> None:
        assert sanitize_url("  example.com  ") == "https://example.com/"

    def test_port_is_preserved(self) -> None:
        assert sanitize_url("localhost:8080/x") == "https://localhost:8080/x"

    def test_empty_port_dropped(self) -> None:
        assert sanitize_url("example.com:") == "https://example.com/"

    def test_ascii_host_lowercased(self) -> None:
        assert sanitize_url("https://Example.COM/Path") == "https://example.com/Path"

    def test_userinfo_case_kept(self) -> None:
        assert sanitize_url("https://Bob@Example.com/") == "https://Bob@example.com/"


# ---------------------------------------------------------------------------
# Tracking parameters
# ---------------------------------------------------------------------------

class TestTrackingRemoval:
    def test_drops_tracking_and_keeps_order(self) -> None:
        out = sanitize_url("https://example.com/p?a=1&utm_source=x&fbclid=y&b=2")
        assert out == "https://example.com/p?a=1&b=2"

    def test_key_match_is_case_insensitive(self) -> None:
        out = sanitize_url("https://example.com/?UTM_Source=x&GCLID=1&keep=yes")
        assert out == "https://example.com/?keep=yes"

    @pytest.mark.parametrize(
        "key",
        ["fbclid", "gclid", "mc_cid", "mc_eid", "ref", "trk", "aff", "igshid", "scid", "utm_campaign"],
    )
    def test_every_default_key_is_dropped(self, key: str) -> None:
        assert sanitize_url(f"https://example.com/?{key}=v&q=1") == "https://example.com/?q=1"

    def test_values_are_never_inspected(self) -> None:
        out = sanitize_url("https://example.com/?q=utm_source&x=fbclid")
        assert out == "https://example.com/?q=utm_source&x=fbclid"

    def test_similar_keys_are_kept(self) -> None:
        out = sanitize_url("https://example.com/?referrer=a&utm=b&my_utm_x=c")
        assert out == "https://example.com/?referrer=a&utm=b&my_utm_x=c"

    def test_non_tracking_query_unchanged(self) -> None:
        url = "https://example.com/search?q=rust&page=2&sort=desc"
        assert sanitize_url(url) == url

    def test_repeated_keys_preserved(self) -> None:
        out = sanitize_url("https://example.com/?tag=a&ref=x&tag=b")
        assert out == "https://example.com/?tag=a&tag=b"

    def test_blank_values_kept(self) -> None:
        assert sanitize_url("https://example.com/?flag=&x=1") == "https://example.com/?flag=&x=1"

    def test_fragment_and_path_untouched(self) -> None:
        out = sanitize_url("https://example.com/a/b?utm_medium=m&id=7#section-2")
        assert out == "https://example.com/a/b?id=7#section-2"

    def test_userinfo_untouched(self) -> None:
        out = sanitize_url("https://user:pw@example.com/?trk=1")
        assert out == "https://user:pw@example.com/"


class TestEmptyQuery:
    def test_query_omitted_when_everything_stripped(self) -> None:
        assert sanitize_url("https://example.com/?utm_source=x&fbclid=y") == "https://example.com/"

    def test_no_query_stays_absent(self) -> None:
        assert "?" not in sanitize_url("https://example.com/page")

    def test_bare_question_mark_dropped(self) -> None:
        assert sanitize_url("https://example.com/?") == "https://example.com/"


class TestIdempotence:
    @pytest.mark.parametrize(
        "raw",
        [
            "wttr.in",
            "https://example.com/p?a=1&utm_source=x&b=2",
            "http://example.com/?q=hello+world&x=%7E",
            "example.com/path?name=J%C3%BCrgen#frag",
        ],
    )
    def test_sanitizing_twice_is_stable(self, raw: str) -> None:
        once = sanitize_url(raw)
        assert sanitize_url(once) == once


# ---------------------------------------------------------------------------
# Injectable denylist
# ---------------------------------------------------------------------------

class TestCustomDenylist:
    def test_extra_key(self) -> None:
        out = sanitize_url(
            "https://example.com/?session=1&a=2",
            tracking_keys={"session"},
            tracking_prefixes=(),
        )
        assert out == "https://example.com/?a=2"

    def test_custom_prefix_replaces_default(self) -> None:
        out = sanitize_url(
            "https://example.com/?utm_source=x&pk_campaign=y",
            tracking_keys=set(),
            tracking_prefixes=("pk_",),
        )
        assert out == "https://example.com/?utm_source=x"

    def test_settings_denylist_is_used_by_default(self, monkeypatch) -> None:
        monkeypatch.setattr("purl.sanitizer.settings.tracking_keys", frozenset({"sid"}))
        monkeypatch.setattr("purl.sanitizer.settings.tracking_prefixes", ())
        out = sanitize_url("https://example.com/?sid=1&fbclid=2")
        assert out == "https://example.com/?fbclid=2"

    def test_strip_tracking_params_direct(self) -> None:
        assert strip_tracking_params("a=1&utm_x=2") == "a=1"

    def test_is_tracking_param(self) -> None:
        assert is_tracking_param("Utm_Term", set(), ("utm_",)) is True
        assert is_tracking_param("page", {"ref"}, ("utm_",)) is False


# ---------------------------------------------------------------------------
# Invalid input
# ---------------------------------------------------------------------------

class TestInvalidUrl:
    def test_spaces_in_host(self) -> None:
        with pytest.raises(InvalidUrlError) as excinfo:
            sanitize_url("not a url at all???")
        assert "https://not a url at all???" in str(excinfo.value)

    def test_empty_input(self) -> None:
        with pytest.raises(InvalidUrlError):
            sanitize_url("")

    def test_empty_host(self) -> None:
        with pytest.raises(InvalidUrlError):
            sanitize_url("https:///path")

    def test_bad_port(self) -> None:
        with pytest.raises(InvalidUrlError):
            sanitize_url("example.com:99999/")

    def test_non_numeric_port(self) -> None:
        with pytest.raises(InvalidUrlError):
            sanitize_url("example.com:abc/")

    def test_forbidden_host_character(self) -> None:
        with pytest.raises(InvalidUrlError):
            sanitize_url("https://exa|mple.com/")

    def test_bad_ipv6_literal(self) -> None:
        with pytest.raises(InvalidUrlError):
            sanitize_url("https://[not-ipv6]/")

    def test_valid_ipv6_literal(self) -> None:
        assert sanitize_url("https://[::1]:8443/x") == "https://[::1]:8443/x"

    def test_idn_host_accepted(self) -> None:
        assert sanitize_url("bücher.example/") == "https://bücher.example/"

    def test_error_exit_code(self) -> None:
        assert InvalidUrlError("x").exit_code == 2
