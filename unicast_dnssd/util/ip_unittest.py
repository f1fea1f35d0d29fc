import ipaddress
import socket

from unicast_dnssd.util import ip as ip_util


# Helper to create a mock psutil address entry
def create_mock_address(mocker, family, address, netmask=None):
    mock_addr = mocker.MagicMock()
    mock_addr.family = family
    mock_addr.address = address
    mock_addr.netmask = netmask
    return mock_addr


def create_mock_stats(mocker, isup=True):
    mock_stats = mocker.MagicMock()
    mock_stats.isup = isup
    return mock_stats


class TestGetInterfaceNetworks:
    def patch_psutil(self, mocker, addrs, stats=None):
        mock_net_if_addrs = mocker.patch("psutil.net_if_addrs")
        mock_net_if_addrs.return_value = addrs
        mock_net_if_stats = mocker.patch("psutil.net_if_stats")
        mock_net_if_stats.return_value = stats or {
            name: create_mock_stats(mocker) for name in addrs
        }
        return mock_net_if_addrs

    def test_no_interfaces(self, mocker):
        mock_net_if_addrs = self.patch_psutil(mocker, {})

        assert ip_util.get_interface_networks() == []
        mock_net_if_addrs.assert_called_once()

    def test_ipv4_with_netmask(self, mocker):
        self.patch_psutil(
            mocker,
            {
                "eth0": [
                    create_mock_address(
                        mocker, socket.AF_INET, "192.168.1.100", "255.255.255.0"
                    ),
                ]
            },
        )

        result = ip_util.get_interface_networks()
        assert result == [ipaddress.ip_interface("192.168.1.100/24")]
        assert result[0].network == ipaddress.ip_network("192.168.1.0/24")

    def test_ipv6_netmask_and_scope(self, mocker):
        self.patch_psutil(
            mocker,
            {
                "eth0": [
                    create_mock_address(
                        mocker,
                        socket.AF_INET6,
                        "2001:db8::10%eth0",
                        "ffff:ffff:ffff:ffff::",
                    ),
                ]
            },
        )

        assert ip_util.get_interface_networks() == [
            ipaddress.ip_interface("2001:db8::10/64")
        ]

    def test_missing_netmask_is_host_route(self, mocker):
        self.patch_psutil(
            mocker,
            {"ppp0": [create_mock_address(mocker, socket.AF_INET, "10.1.2.3")]},
        )

        assert ip_util.get_interface_networks() == [
            ipaddress.ip_interface("10.1.2.3/32")
        ]

    def test_loopback_link_local_and_other_families_skipped(self, mocker):
        self.patch_psutil(
            mocker,
            {
                "lo": [
                    create_mock_address(
                        mocker, socket.AF_INET, "127.0.0.1", "255.0.0.0"
                    ),
                    create_mock_address(mocker, socket.AF_INET6, "::1"),
                ],
                "eth0": [
                    create_mock_address(
                        mocker, socket.AF_INET6, "fe80::1%eth0", "ffff:ffff:ffff:ffff::"
                    ),
                    create_mock_address(mocker, socket.AF_PACKET, "00:11:22:33:44:55"),  # type: ignore
                    create_mock_address(
                        mocker, socket.AF_INET, "172.16.0.10", "255.255.0.0"
                    ),
                ],
            },
        )

        assert ip_util.get_interface_networks() == [
            ipaddress.ip_interface("172.16.0.10/16")
        ]

    def test_down_interfaces_skipped(self, mocker):
        addrs = {
            "eth0": [
                create_mock_address(
                    mocker, socket.AF_INET, "10.0.0.5", "255.0.0.0"
                )
            ],
            "eth1": [
                create_mock_address(
                    mocker, socket.AF_INET, "192.0.2.7", "255.255.255.0"
                )
            ],
        }
        stats = {
            "eth0": create_mock_stats(mocker, isup=False),
            "eth1": create_mock_stats(mocker, isup=True),
        }
        self.patch_psutil(mocker, addrs, stats)

        assert ip_util.get_interface_networks() == [
            ipaddress.ip_interface("192.0.2.7/24")
        ]

    def test_unparsable_address_skipped(self, mocker):
        self.patch_psutil(
            mocker,
            {
                "eth0": [
                    create_mock_address(mocker, socket.AF_INET, "bogus", None),
                    create_mock_address(
                        mocker, socket.AF_INET, "10.0.0.5", "255.0.0.0"
                    ),
                ]
            },
        )

        assert ip_util.get_interface_networks() == [
            ipaddress.ip_interface("10.0.0.5/8")
        ]
