import io

import pytest
from rich.console import Console

from elb_docker_sync.errors import TargetGroupNotFoundError
from elb_docker_sync.models import ContainerRecord, PortMapping, Target

HOST = "i-0abc"


def container(name: str, *public_ports: int) -> ContainerRecord:
    """Docker-style record; names carry the leading '/' like the Engine API reports them."""
    return ContainerRecord(name=f"/{name}", ports=[PortMapping(public_port=p) for p in public_ports])


class FakeRuntime:
    def __init__(self, containers=None):
        self.containers = list(containers or [])
        self.calls = 0

    def list_containers(self):
        self.calls += 1
        return list(self.containers)


class FakeLoadBalancer:
    """In-memory target groups keyed by name; records every call it receives."""

    def __init__(self, groups=None):
        self.groups: dict[str, set[tuple[str, int]]] = {name: set(t) for name, t in (groups or {}).items()}
        self.calls: list[tuple] = []

    @staticmethod
    def arn(name: str) -> str:
        return f"arn:aws:elasticloadbalancing:us-east-1:123456789012:targetgroup/{name}/0123456789abcdef"

    def _name(self, handle: str) -> str:
        return handle.split("/")[1]

    def resolve_target_group(self, name):
        self.calls.append(("resolve", name))
        if name not in self.groups:
            raise TargetGroupNotFoundError(name)
        return self.arn(name)

    def describe_target_health(self, handle):
        self.calls.append(("describe", handle))
        return sorted(self.groups[self._name(handle)])

    def register_target(self, handle, target: Target):
        self.calls.append(("register", handle, target))
        self.groups[self._name(handle)].add((target.host_id, target.port))

    def deregister_target(self, handle, target: Target):
        self.calls.append(("deregister", handle, target))
        self.groups[self._name(handle)].discard((target.host_id, target.port))

    def mutations(self):
        return [c for c in self.calls if c[0] in ("register", "deregister")]


@pytest.fixture
def output():
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def runtime():
    return FakeRuntime()


@pytest.fixture
def load_balancer():
    return FakeLoadBalancer()
