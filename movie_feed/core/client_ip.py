"""Client IP extraction for requests arriving through reverse proxies."""
from __future__ import annotations

import ipaddress
from enum import Enum
from typing import Mapping


class ClientIpSource(str, Enum):
    CONNECT_INFO = "ConnectInfo"
    CF_CONNECTING_IP = "CfConnectingIp"
    CLOUDFRONT_VIEWER_ADDRESS = "CloudFrontViewerAddress"
    FLY_CLIENT_IP = "FlyClientIp"
    RIGHTMOST_FORWARDED = "RightmostForwarded"
    RIGHTMOST_X_FORWARDED_FOR = "RightmostXForwardedFor"
    TRUE_CLIENT_IP = "TrueClientIp"
    X_REAL_IP = "XRealIp"


_SINGLE_HEADER_SOURCES: dict[ClientIpSource, str] = {
    ClientIpSource.CF_CONNECTING_IP: "cf-connecting-ip",
    ClientIpSource.FLY_CLIENT_IP: "fly-client-ip",
    ClientIpSource.TRUE_CLIENT_IP: "true-client-ip",
    ClientIpSource.X_REAL_IP: "x-real-ip",
}


def _valid_ip(candidate: str | None) -> str | None:
    if not candidate:
        return None
    try:
        return str(ipaddress.ip_address(candidate.strip()))
    except ValueError:
        return None


def _strip_port(value: str) -> str:
    value = value.strip().strip('"')
    if value.startswith("["):
        end = value.find("]")
        return value[1:end] if end != -1 else value
    if value.count(":") == 1:
        return value.split(":", 1)[0]
    return value


def _header_values(headers: Mapping[str, str], name: str) -> list[str]:
    getlist = getattr(headers, "getlist", None)
    if getlist is not None:
        return list(getlist(name))
    value = headers.get(name)
    return [value] if value is not None else []


def _rightmost_x_forwarded_for(headers: Mapping[str, str]) -> str | None:
    entries = [
        entry.strip()
        for value in _header_values(headers, "x-forwarded-for")
        for entry in value.split(",")
        if entry.strip()
    ]
    return _valid_ip(entries[-1]) if entries else None


def _rightmost_forwarded(headers: Mapping[str, str]) -> str | None:
    found: str | None = None
    for value in _header_values(headers, "forwarded"):
        for element in value.split(","):
            for pair in element.split(";"):
                key, _, raw = pair.partition("=")
                if key.strip().lower() == "for" and raw:
                    found = _strip_port(raw)
    return _valid_ip(found)


def _cloudfront_viewer_address(headers: Mapping[str, str]) -> str | None:
    value = headers.get("cloudfront-viewer-address")
    if not value:
        return None
    # the header is always ``<ip>:<port>``, including for IPv6 addresses
    host, _, port = value.strip().rpartition(":")
    if not host or not port.isdigit():
        return None
    return _valid_ip(host)


def resolve_client_ip(
    source: ClientIpSource,
    headers: Mapping[str, str],
    peer: str | None,
) -> str | None:
    """Return the client IP for ``source`` or ``None`` when it is unavailable."""

    if source is ClientIpSource.CONNECT_INFO:
        return _valid_ip(peer)
    if source is ClientIpSource.RIGHTMOST_X_FORWARDED_FOR:
        return _rightmost_x_forwarded_for(headers)
    if source is ClientIpSource.RIGHTMOST_FORWARDED:
        return _rightmost_forwarded(headers)
    if source is ClientIpSource.CLOUDFRONT_VIEWER_ADDRESS:
        return _cloudfront_viewer_address(headers)
    return _valid_ip(headers.get(_SINGLE_HEADER_SOURCES[source]))


__all__ = ["ClientIpSource", "resolve_client_ip"]
