"""Validation helpers for server and site input.

Each function returns the (normalised) value or raises ValidationError with a
message suitable for showing to the user.
"""

from __future__ import annotations

import ipaddress
import re

from deployer.errors import ValidationError

# RFC 1123 hostname label
_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")
_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_valid_hostname(value: str) -> bool:
    hostname = value[:-1] if value.endswith(".") else value
    if not hostname or len(hostname) > 253:
        return False
    return all(_LABEL.match(label) for label in hostname.split("."))


def validate_server_name(name: str) -> str:
    """Server names become inventory path segments, so dots are not allowed."""
    name = name.strip()
    if not name:
        raise ValidationError("Server name cannot be empty")
    if not _NAME.match(name):
        raise ValidationError(
            f"Invalid server name '{name}'. Use letters, digits, '-' or '_' only.\n"
            "Examples: web1, db-primary, worker_2"
        )
    return name


def validate_host(host: str) -> str:
    host = host.strip()
    if not is_valid_ip(host) and not is_valid_hostname(host):
        raise ValidationError(
            f"Invalid host '{host}'. Must be a valid IP address or domain name.\n"
            "Examples: 192.168.1.100, example.com, server.example.com"
        )
    return host


def validate_port(port: int) -> int:
    if port < 1 or port > 65535:
        raise ValidationError(
            f"Invalid port {port}. Port must be between 1 and 65535.\n"
            "Common SSH ports: 22 (default), 2222, 22000"
        )
    return port


def validate_username(username: str) -> str:
    username = username.strip()
    if not username:
        raise ValidationError("Username cannot be empty")
    return username


def validate_domain(domain: str) -> str:
    domain = domain.strip().lower()
    if "." not in domain.strip(".") or not is_valid_hostname(domain):
        raise ValidationError(
            "Must be a valid domain name (e.g., example.com, subdomain.example.com)"
        )
    return domain


def validate_branch(branch: str) -> str:
    branch = branch.strip()
    if not branch:
        raise ValidationError("Branch name cannot be empty")
    return branch
