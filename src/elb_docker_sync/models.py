from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError


class Target(BaseModel):
    """A registrable endpoint: one port on one instance."""

    model_config = ConfigDict(frozen=True)

    host_id: str = Field(..., min_length=1, description="Instance identifier")
    port: int = Field(..., ge=1, le=65535, description="Port registered with the target group")

    def __str__(self) -> str:
        return f"{self.host_id}:{self.port}"


TargetSet = frozenset[Target]


class PortMapping(BaseModel):
    public_port: int = Field(0, ge=0, le=65535, description="Host port, 0 when not published")


class ContainerRecord(BaseModel):
    name: str = Field(..., description="Primary container name as reported by the runtime")
    ports: list[PortMapping] = Field(default_factory=list)


class SyncPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    name_prefix: str = Field(..., min_length=1, description="Literal container name prefix")
    target_group_name: str = Field(..., min_length=1, description="ELBv2 target group name")

    @classmethod
    def parse(cls, raw: str) -> "SyncPair":
        """Parse a '<namePrefix>,<targetGroupName>' argument."""
        pieces = raw.split(",")
        if len(pieces) != 2:
            raise ConfigurationError(f"Invalid sync pair '{raw}': expected '<namePrefix>,<targetGroupName>'")
        try:
            return cls(name_prefix=pieces[0], target_group_name=pieces[1])
        except ValidationError as e:
            raise ConfigurationError(f"Invalid sync pair '{raw}': {e.error_count()} empty field(s)") from e

    def __str__(self) -> str:
        return f"{self.name_prefix}* -> {self.target_group_name}"


class SyncConfig(BaseModel):
    pairs: list[SyncPair] = Field(default_factory=list)

    @field_validator("pairs")
    @classmethod
    def reject_duplicates(cls, v: list[SyncPair]) -> list[SyncPair]:
        if len(set(v)) != len(v):
            raise ValueError("duplicate sync pairs")
        return v


class SyncPlan(BaseModel):
    """The diff computed for one sync pair on one tick."""

    model_config = ConfigDict(frozen=True)

    to_register: frozenset[Target] = frozenset()
    to_deregister: frozenset[Target] = frozenset()
    skipped: bool = False

    @property
    def is_noop(self) -> bool:
        return self.skipped or not (self.to_register or self.to_deregister)
