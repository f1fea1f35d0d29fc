"""DnsUpdateTransport implementation that sends dnspython UpdateMessages."""

import logging
from typing import Optional

import dns.exception
import dns.message
import dns.query
import dns.rcode
import dns.resolver
import dns.update

from unicast_dnssd.errors import InvalidArgumentError, TransportError
from unicast_dnssd.transport.dns_update import DnsUpdate
from unicast_dnssd.transport.dns_update_transport import (
    DNS_PORT,
    DnsUpdateTransport,
    UpdateEndpoint,
)
from unicast_dnssd.transport.tsig_key import TsigKey

_logger = logging.getLogger(__name__)


def default_update_endpoint(
    resolver: Optional[dns.resolver.Resolver] = None,
) -> UpdateEndpoint:
    """Returns the first nameserver of the system resolver configuration.

    Raises:
        TransportError: If no resolver configuration or nameserver exists.
    """
    try:
        if resolver is None:
            resolver = dns.resolver.Resolver()
    except dns.exception.DNSException as e:
        raise TransportError("No system resolver configuration found") from e

    for nameserver in resolver.nameservers:
        if isinstance(nameserver, str):
            return UpdateEndpoint(nameserver, resolver.port or DNS_PORT)
        address = getattr(nameserver, "address", None)
        if address:
            return UpdateEndpoint(
                address, getattr(nameserver, "port", DNS_PORT)
            )
    raise TransportError("System resolver has no usable nameserver")


def build_update_message(
    update: DnsUpdate, tsig_key: Optional[TsigKey] = None
) -> dns.update.UpdateMessage:
    """Converts `update` into a (signed) `dns.update.UpdateMessage`."""
    message = dns.update.UpdateMessage(update.zone)
    for prerequisite in update.prerequisites:
        if prerequisite.exists:
            message.present(prerequisite.name)
        else:
            message.absent(prerequisite.name)
    for deletion in update.deletions:
        if deletion.rdata is None:
            message.delete(deletion.name)
        else:
            message.delete(deletion.name, deletion.rdata)
    for record in update.additions:
        message.add(record.name, record.ttl, record.rdata)

    if tsig_key is not None:
        message.use_tsig(tsig_key.to_dnspython_key())
    return message


class DnsPythonUpdateTransport(DnsUpdateTransport):
    """Sends updates over UDP, retrying over TCP on truncation."""

    def __init__(self, endpoint: UpdateEndpoint, *, timeout: float = 10.0):
        if timeout <= 0:
            raise InvalidArgumentError(
                f"timeout must be positive, got {timeout}."
            )
        self.__endpoint = endpoint
        self.__timeout = timeout

    @property
    def endpoint(self) -> UpdateEndpoint:
        return self.__endpoint

    def send_update(
        self, update: DnsUpdate, tsig_key: Optional[TsigKey] = None
    ) -> dns.rcode.Rcode:
        message = build_update_message(update, tsig_key)
        _logger.debug(
            "Sending update for zone %s to %s (signed: %s).",
            update.zone,
            self.__endpoint,
            tsig_key is not None,
        )
        try:
            response, _ = dns.query.udp_with_fallback(
                message,
                self.__endpoint.address,
                timeout=self.__timeout,
                port=self.__endpoint.port,
            )
        except (dns.exception.DNSException, OSError) as e:
            raise TransportError(
                f"Update for zone {update.zone} to {self.__endpoint} failed"
            ) from e

        assert isinstance(response, dns.message.Message)
        rcode = response.rcode()
        _logger.debug(
            "Update for zone %s answered with %s.",
            update.zone,
            dns.rcode.to_text(rcode),
        )
        return rcode
