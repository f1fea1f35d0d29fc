import dataclasses

import pytest

from unicast_dnssd.config.dnssd_config import DnsSDConfig
from unicast_dnssd.errors import InvalidArgumentError


class TestDnsSDConfig:
    def test_defaults(self):
        config = DnsSDConfig()
        assert config.computer_domain is None
        assert config.host_name is None
        assert config.nameservers == ()
        assert config.query_timeout == 5.0
        assert config.update_timeout == 10.0
        assert config.default_ttl == 60
        assert config.max_workers is None

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DnsSDConfig().default_ttl = 5  # type: ignore[misc]

    def test_nameservers_become_tuple(self):
        assert DnsSDConfig(nameservers=["192.0.2.1"]).nameservers == (
            "192.0.2.1",
        )

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"query_timeout": 0},
            {"update_timeout": -1},
            {"default_ttl": -5},
            {"max_workers": 0},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidArgumentError):
            DnsSDConfig(**kwargs)

    def test_from_environment(self):
        config = DnsSDConfig.from_environment(
            {
                "DNSSD_DOMAIN": "example.com",
                "DNSSD_HOSTNAME": "box.example.com",
                "DNSSD_NAMESERVERS": "192.0.2.1, 192.0.2.2,,",
                "DNSSD_QUERY_TIMEOUT": "1.5",
                "DNSSD_UPDATE_TIMEOUT": "3",
                "DNSSD_TTL": "120",
                "DNSSD_MAX_WORKERS": "4",
            }
        )
        assert config == DnsSDConfig(
            computer_domain="example.com",
            host_name="box.example.com",
            nameservers=("192.0.2.1", "192.0.2.2"),
            query_timeout=1.5,
            update_timeout=3.0,
            default_ttl=120,
            max_workers=4,
        )

    def test_from_empty_environment(self):
        assert DnsSDConfig.from_environment({}) == DnsSDConfig()

    def test_empty_values_keep_defaults(self):
        config = DnsSDConfig.from_environment(
            {"DNSSD_DOMAIN": "", "DNSSD_TTL": "  "}
        )
        assert config == DnsSDConfig()

    def test_reads_os_environ(self, mocker):
        mocker.patch.dict("os.environ", {"DNSSD_TTL": "30"}, clear=True)
        assert DnsSDConfig.from_environment().default_ttl == 30

    @pytest.mark.parametrize(
        "key", ["DNSSD_TTL", "DNSSD_QUERY_TIMEOUT", "DNSSD_MAX_WORKERS"]
    )
    def test_malformed_number(self, key):
        with pytest.raises(InvalidArgumentError):
            DnsSDConfig.from_environment({key: "abc"})
