from unicast_dnssd.config.dnssd_config import DnsSDConfig

__all__ = ["DnsSDConfig"]
