"""Tests for URL host extraction and allowlist matching."""

from skillscan.hosts import all_hosts_allowed, extract_hosts, has_host, host_is_allowed

ALLOWED = ("github.com", "pypi.org")


class TestExtractHosts:
    def test_simple(self):
        assert list(extract_hosts("curl https://github.com/x")) == ["github.com"]

    def test_userinfo_and_port(self):
        assert list(extract_hosts("wget http://user:pw@Example.COM:8080/a")) == ["example.com"]

    def test_fragment_stops_host(self):
        assert list(extract_hosts("curl https://evil.com#.github.com")) == ["evil.com"]

    def test_multiple_urls(self):
        line = "curl https://github.com/a https://evil.com/b"
        assert list(extract_hosts(line)) == ["github.com", "evil.com"]

    def test_no_url(self):
        assert not has_host("curl localhost")


class TestHostIsAllowed:
    def test_exact(self):
        assert host_is_allowed("github.com", ALLOWED)

    def test_subdomain(self):
        assert host_is_allowed("api.github.com", ALLOWED)

    def test_suffix_without_dot_rejected(self):
        assert not host_is_allowed("evilgithub.com", ALLOWED)

    def test_allowed_name_as_prefix_rejected(self):
        assert not host_is_allowed("github.com.evil.com", ALLOWED)

    def test_empty_entry_is_not_wildcard(self):
        assert not host_is_allowed("evil.com", ("",))


class TestAllHostsAllowed:
    def test_all_allowed(self):
        assert all_hosts_allowed("curl https://github.com/a https://pypi.org/b", ALLOWED)

    def test_mixed_not_allowed(self):
        assert not all_hosts_allowed("curl https://github.com/a https://evil.com/b", ALLOWED)

    def test_path_does_not_count(self):
        assert not all_hosts_allowed("curl https://evil.com/github.com/x", ALLOWED)

    def test_no_host_is_not_allowed(self):
        assert not all_hosts_allowed("curl $URL", ALLOWED)


class TestSpoofingCases:
    GITHUB = ("github.com",)

    def test_allowed_name_as_label_prefix(self):
        assert list(extract_hosts("https://github.com.evil.com/x")) == ["github.com.evil.com"]
        assert not all_hosts_allowed("https://github.com.evil.com/x", self.GITHUB)

    def test_userinfo_stripped(self):
        assert all_hosts_allowed("https://user@github.com/x", self.GITHUB)

    def test_port_stripped(self):
        assert all_hosts_allowed("https://github.com:443/x", self.GITHUB)

    def test_fragment_cannot_spoof(self):
        assert not all_hosts_allowed("https://evil.com#.github.com", self.GITHUB)
