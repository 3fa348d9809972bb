"""Registration of this service with a Consul agent."""

from __future__ import annotations

import json
import logging
import os
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field

_log = logging.getLogger(__name__)

DEFAULT_CONSUL_ADDRESS = "127.0.0.1:8500"
_REGISTER_PATH = "/v1/agent/service/register"


class DiscoveryError(Exception):
    """Raised when the service cannot be registered."""


@dataclass
class ServiceRegistration:
    """A service as announced to Consul, with an HTTP health check."""

    name: str
    port: int
    address: str
    tags: list[str] = field(default_factory=list)

    def to_payload(self) -> dict:
        return {
            "Name": self.name,
            "Port": self.port,
            "Address": self.address,
            "Tags": list(self.tags),
            "Check": {
                "HTTP": f"http://{self.address}:{self.port}/health",
                "Interval": "10s",
                "Timeout": "2s",
                "DeregisterCriticalServiceAfter": "1m",
            },
        }


def registration_from_env(environ: Mapping[str, str] | None = None) -> ServiceRegistration:
    """Build a registration from PORT and the CONSUL_* settings."""
    env = os.environ if environ is None else environ
    try:
        port = int(env.get("PORT", ""))
    except ValueError:
        raise DiscoveryError("port parse error") from None
    return ServiceRegistration(
        name=env.get("CONSUL_SERVICE_NAME", ""),
        port=port,
        address=env.get("CONSUL_SERVICE_ADDRESS", ""),
        tags=env.get("CONSUL_TAGS", "").split(","),
    )


def _agent_url(consul_host: str | None) -> str:
    host = consul_host or DEFAULT_CONSUL_ADDRESS
    if "://" not in host:
        host = f"http://{host}"
    return host.rstrip("/") + _REGISTER_PATH


def register_service(registration: ServiceRegistration, consul_host: str | None = None) -> None:
    """Register the service with the Consul agent at consul_host."""
    body = json.dumps(registration.to_payload()).encode("utf-8")
    request = urllib.request.Request(
        _agent_url(consul_host),
        data=body,
        method="PUT",
        headers={"Content-Type": "application/json"},
    )
    try:
        with urllib.request.urlopen(request, timeout=10) as response:
            response.read()
    except (OSError, ValueError) as exc:
        raise DiscoveryError(f"error while service registration due to error '{exc}'") from exc


def init_service_discovery(environ: Mapping[str, str] | None = None) -> ServiceRegistration:
    """Register this service in Consul using settings from the environment."""
    env = os.environ if environ is None else environ
    _log.info("initializing consul client")
    registration = registration_from_env(env)
    _log.info("register service in consul")
    register_service(registration, env.get("CONSUL_HOST"))
    _log.info("service registered in consul")
    return registration