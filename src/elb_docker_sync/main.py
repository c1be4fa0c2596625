import sys
from pathlib import Path

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .daemon import ErrorPolicy, SyncDaemon
from .errors import ConfigurationError, SyncError
from .identity import resolve_host_id
from .load_balancer import ElbV2LoadBalancer
from .models import SyncConfig, SyncPair
from .reconciler import Reconciler
from .runtime import DockerRuntime
from .settings import get_settings

console = Console()


def load_config_file(path: Path) -> list[SyncPair]:
    """Reads `pairs: [{name_prefix, target_group_name}, ...]` from a YAML file."""
    if not path.exists():
        raise ConfigurationError(f"{path} not found.")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    try:
        return SyncConfig.model_validate(raw_config).pairs
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e


def load_pairs(args: list[str], config_file: Path | None = None) -> list[SyncPair]:
    pairs = [SyncPair.parse(arg) for arg in args]
    if config_file is not None:
        pairs.extend(load_config_file(config_file))

    # Keep first occurrence, preserve order
    pairs = list(dict.fromkeys(pairs))
    if not pairs:
        raise ConfigurationError("No sync pairs given. Usage: elb-docker-sync <namePrefix>,<targetGroupName> ...")
    return pairs


def build_daemon(pairs: list[SyncPair]) -> SyncDaemon:
    settings = get_settings()
    host_id = resolve_host_id(settings.INSTANCE_ID, settings.METADATA_URL, settings.METADATA_TIMEOUT)
    load_balancer = ElbV2LoadBalancer(region=settings.AWS_REGION)

    return SyncDaemon(
        pairs=pairs,
        host_id=host_id,
        runtime=DockerRuntime(base_url=settings.DOCKER_BASE_URL),
        load_balancer=load_balancer,
        reconciler=Reconciler(load_balancer, output=console, verbose=settings.VERBOSE),
        interval=settings.POLLING_INTERVAL,
        control_interval=settings.CONTROL_INTERVAL,
        policy=ErrorPolicy.FAIL_FAST if settings.FAIL_FAST else ErrorPolicy.CONTINUE,
        output=console,
    )


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    try:
        pairs = load_pairs(args, get_settings().CONFIG_FILE)
        build_daemon(pairs).start()
    except SyncError as e:
        console.print(f"[bold red]Fatal: {type(e).__name__}:[/bold red] {escape(str(e))}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
