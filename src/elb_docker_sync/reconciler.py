from rich.console import Console
from rich.markup import escape

from .load_balancer import LoadBalancer
from .models import SyncPlan, Target, TargetSet

console = Console()


def _ordered(targets: frozenset[Target]) -> list[Target]:
    return sorted(targets, key=lambda t: (t.host_id, t.port))


class Reconciler:
    def __init__(self, load_balancer: LoadBalancer, output: Console | None = None, verbose: bool = False):
        self.load_balancer = load_balancer
        self.console = output or console
        self.verbose = verbose

    def plan(self, desired: TargetSet, actual: TargetSet) -> SyncPlan:
        # No action on an empty desired set, the container listing may be bad data
        if not desired:
            return SyncPlan(skipped=True)

        return SyncPlan(to_register=desired - actual, to_deregister=actual - desired)

    def apply(self, target_group_name: str, handle: str, plan: SyncPlan) -> None:
        """Registers first, then deregisters."""
        tag = escape(f"[{target_group_name}]")

        if plan.skipped:
            if self.verbose:
                self.console.print(f"[dim]{tag} Skipping since no containers are matched[/dim]")
            return

        for target in _ordered(plan.to_register):
            self.console.log(f"{tag} Registering {target}")
            self.load_balancer.register_target(handle, target)

        for target in _ordered(plan.to_deregister):
            self.console.log(f"{tag} De-Registering {target}")
            self.load_balancer.deregister_target(handle, target)

    def reconcile(self, target_group_name: str, handle: str, desired: TargetSet, actual: TargetSet) -> SyncPlan:
        plan = self.plan(desired, actual)
        if self.verbose:
            self.console.print(
                f"[dim]{escape(f'[{target_group_name}]')} Found {len(actual)} old targets, "
                f"{len(desired)} new targets[/dim]"
            )
        self.apply(target_group_name, handle, plan)
        return plan
