from typing import Any, Protocol

import docker
from docker.errors import DockerException
from docker.utils import kwargs_from_env
from requests.exceptions import RequestException

from .errors import RuntimeUnavailableError
from .models import ContainerRecord, PortMapping

USER_AGENT = "elb-docker-sync"


class ContainerRuntime(Protocol):
    def list_containers(self) -> list[ContainerRecord]:
        """Every container on the host, stopped ones included."""
        ...


def _to_record(raw: dict[str, Any]) -> ContainerRecord:
    names = raw.get("Names") or [""]
    ports = [PortMapping(public_port=p.get("PublicPort") or 0) for p in raw.get("Ports") or []]
    return ContainerRecord(name=names[0], ports=ports)


class DockerRuntime:
    """Container listing backed by the Docker Engine API."""

    def __init__(self, base_url: str | None = None, client: docker.DockerClient | None = None):
        self._base_url = base_url
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            # Same connection settings as docker.from_env(), plus the user agent
            connection = {"base_url": self._base_url} if self._base_url else kwargs_from_env()
            try:
                self._client = docker.DockerClient(user_agent=USER_AGENT, **connection)
            except (DockerException, RequestException) as e:
                raise RuntimeUnavailableError(f"Could not connect to Docker Daemon: {e}") from e
        return self._client

    def list_containers(self) -> list[ContainerRecord]:
        # Low-level listing: raw Names/Ports, no per-container inspect
        try:
            raw_containers = self.client.api.containers(all=True)
        except (DockerException, RequestException) as e:
            raise RuntimeUnavailableError(f"Could not list containers: {e}") from e

        return [_to_record(raw) for raw in raw_containers]
