from collections import defaultdict

from .load_balancer import LoadBalancer
from .models import ContainerRecord, Target, TargetSet
from .runtime import ContainerRuntime
from .versions import extract_version

NAME_SEPARATOR = "/"


def strip_separator(name: str) -> str:
    """Docker reports primary names with a leading '/'."""
    return name[1:] if name.startswith(NAME_SEPARATOR) else name


def group_by_version(
    containers: list[ContainerRecord], name_prefix: str
) -> dict[int | None, list[ContainerRecord]]:
    groups: dict[int | None, list[ContainerRecord]] = defaultdict(list)
    for container in containers:
        name = strip_separator(container.name)
        if not name.startswith(name_prefix):
            continue
        groups[extract_version(name)].append(container)
    return dict(groups)


def resolve_desired_targets(runtime: ContainerRuntime, host_id: str, name_prefix: str) -> TargetSet:
    """
    Targets that should be registered for this host.

    Only containers carrying the highest version tag among those matching the
    prefix contribute, so a newer deploy immediately takes over from older ones
    that are still running. Unversioned containers never contribute.
    """
    groups = group_by_version(runtime.list_containers(), name_prefix)

    versions = [v for v in groups if v is not None]
    if not versions:
        return frozenset()
    highest_version = max(versions)

    return frozenset(
        Target(host_id=host_id, port=port.public_port)
        for container in groups[highest_version]
        for port in container.ports
        if port.public_port != 0
    )


def resolve_actual_targets(load_balancer: LoadBalancer, host_id: str, handle: str) -> TargetSet:
    """Targets currently registered for this host in the target group."""
    return frozenset(
        Target(host_id=target_id, port=port)
        for target_id, port in load_balancer.describe_target_health(handle)
        if target_id == host_id
    )
