"""
Tests for AutolinkScanner
"""

import threading

from .autolink import AutolinkScanner, LinkSpan


class TestAutolinkScanner:
    """Test bare URL detection"""

    def setup_method(self):
        self.scanner = AutolinkScanner()

    def test_finds_scheme_urls(self):
        text = "see https://example.com/path?q=1 and http://a.b"
        assert self.scanner.findLinks(text) == [
            LinkSpan(4, 32, "https://example.com/path?q=1"),
            LinkSpan(37, 47, "http://a.b"),
        ]

    def test_offset_is_applied(self):
        assert self.scanner.findLinks("x https://a.b", 10) == [LinkSpan(12, 23, "https://a.b")]

    def test_trailing_punctuation_is_excluded(self):
        assert self.scanner.findLinks("(https://a.b).") == [LinkSpan(1, 12, "https://a.b")]

    def test_mailto(self):
        spans = self.scanner.findLinks("write to mailto:me@example.com now")
        assert spans == [LinkSpan(9, 30, "mailto:me@example.com")]

    def test_other_schemes(self):
        """Any scheme followed by ``//`` is a URL"""
        assert self.scanner.findLinks("see zed://settings now") == [LinkSpan(4, 18, "zed://settings")]
        assert self.scanner.findLinks("clone ssh://git@host/repo now") == [LinkSpan(6, 25, "ssh://git@host/repo")]
        assert self.scanner.findLinks("open file:///etc/hosts") == [LinkSpan(5, 22, "file:///etc/hosts")]

    def test_scheme_is_case_insensitive(self):
        assert self.scanner.findLinks("a zed://one b ZED://two") == [
            LinkSpan(2, 11, "zed://one"),
            LinkSpan(14, 23, "ZED://two"),
        ]

    def test_scheme_without_target_is_not_a_link(self):
        assert self.scanner.findLinks("zed:// alone and zed:settings") == []

    def test_registered_scheme_needs_authority(self):
        """A scheme seen once still requires ``//`` on later texts"""
        assert self.scanner.findLinks("zed://settings") == [LinkSpan(0, 14, "zed://settings")]
        assert self.scanner.findLinks("zed:settings") == []

    def test_fuzzy_links_are_ignored(self):
        """Bare domains, emails, IPs and protocol-relative links stay text"""
        assert self.scanner.findLinks("example.com me@example.com 127.0.0.1 //example.com") == []

    def test_url_is_the_source_slice(self):
        """The matched text is reported as written, without normalization"""
        [span] = self.scanner.findLinks("go https://Example.COM/Päth")
        assert span.url == "https://Example.COM/Päth"

    def test_no_links(self):
        assert self.scanner.findLinks("") == []
        assert self.scanner.findLinks("nothing to see here") == []

    def test_scanner_per_thread(self):
        results = []

        def worker():
            results.append(self.scanner.findLinks("a https://a.b"))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [[LinkSpan(2, 13, "https://a.b")]] * 4
