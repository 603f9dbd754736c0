"""Input/output types for HostQuote."""
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Frozen(BaseModel):
    """Base for configuration models: never mutated after load."""
    model_config = ConfigDict(frozen=True)


class MainServerResources(_Frozen):
    """Baseline specs for the main server (application + database)."""
    os: str = Field(..., description="Operating system label")
    ram: float = Field(0, ge=0, description="Base RAM in GB")
    disk: float = Field(..., ge=0, description="Configured disk in GB (on top of the 100 GB base)")
    database_ram: Optional[float] = Field(None, ge=0, description="RAM reserved for the database (GB)")


class TerminalServerResources(_Frozen):
    """Baseline specs for terminal servers (user sessions only)."""
    os: str
    ram_per_user: float = Field(..., ge=0, description="RAM per user session (GB)")
    ram_per_gateway: float = Field(0, ge=0, description="RAM per gateway (GB)")
    disk: float = Field(..., ge=0, description="Configured disk in GB (on top of the 100 GB base)")


class ServerResources(_Frozen):
    main_server: MainServerResources
    terminal_server: TerminalServerResources


class MainServerSpec(_Frozen):
    cpus: int = Field(..., ge=1)
    min_ram: float = Field(..., ge=0, description="RAM floor in GB")


class TerminalServerSpec(_Frozen):
    cpus: int = Field(..., ge=1)
    min_ram: Optional[float] = Field(None, ge=0, description="RAM floor in GB (12 when unset)")


class VmSpecs(_Frozen):
    main_server: MainServerSpec
    terminal_server: TerminalServerSpec


class AdditionalFeesConfig(_Frozen):
    """Flat fees. None means the fee is not offered; 0 is a legitimate price."""
    setup: Optional[float] = Field(None, ge=0, description="One-time installation fee")
    support: Optional[float] = Field(None, ge=0, description="Recurring support fee")
    storage: Optional[float] = Field(None, ge=0, description="Per additional GB (not computed automatically)")


class ResourceCosts(_Frozen):
    """Unit rate card."""
    vm_base_cost: float = Field(..., ge=0, description="Flat cost per VM")
    cpu_cost: float = Field(..., ge=0, description="Cost per vCPU")
    ram_cost_per_gb: float = Field(..., ge=0)
    disk_cost_per_gb: float = Field(..., ge=0)
    terminal_server_cal_cost: float = Field(..., ge=0, description="Terminal server CAL, per user")
    duo_security_cost: float = Field(..., ge=0, description="Two-factor license, per user")
    vm_specs: VmSpecs
    cost_per_user: Optional[float] = Field(None, ge=0)
    database_cost: Optional[float] = Field(None, ge=0)
    gateway_cost: Optional[float] = Field(None, ge=0)
    additional_fees: Optional[AdditionalFeesConfig] = None


class VmCalculationRules(_Frozen):
    """Allocation thresholds (users per server)."""
    min_users_per_server: int = Field(..., ge=1)
    max_users_per_server: int = Field(..., ge=1)
    max_users_on_main_server: int = Field(..., ge=1)

    @model_validator(mode="after")
    def _check_band(self):
        if self.min_users_per_server > self.max_users_per_server:
            raise ValueError("min_users_per_server must not exceed max_users_per_server")
        if self.max_users_on_main_server > self.max_users_per_server:
            raise ValueError("max_users_on_main_server must not exceed max_users_per_server")
        return self


class Prerequisites(_Frozen):
    min_users: Optional[int] = Field(None, ge=0)
    max_users: Optional[int] = Field(None, ge=1)
    required_features: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min_users is not None and self.max_users is not None and self.min_users > self.max_users:
            raise ValueError("prerequisites.min_users must not exceed prerequisites.max_users")
        return self


class PricingConfig(_Frozen):
    """A complete rate card."""
    currency: str = Field("CAD", min_length=3, max_length=3)
    billing_period: Literal["monthly", "annual"] = "monthly"
    server_resources: ServerResources
    costs: ResourceCosts
    vm_calculation: VmCalculationRules
    prerequisites: Prerequisites = Field(default_factory=Prerequisites)


class VmConfiguration(BaseModel):
    """Server topology for a user count."""
    main_server_count: int = 1
    terminal_server_count: int
    total_vms: int
    users_on_main_server: int
    users_per_terminal_server: float  # average, not a headcount


class RequiredResources(BaseModel):
    """Raw RAM/disk requirements of a topology (GB), before floors."""
    total_ram: float
    total_disk: float
    main_server_ram: float
    main_server_disk: float
    terminal_server_ram: float
    terminal_server_disk: float


class ServerResourceCost(BaseModel):
    """Per-VM resource cost line items and the quantities they price."""
    vm_base: float
    cpus: float
    ram: float
    disk: float
    total: float
    cpu_count: int
    ram_gb: float
    disk_gb: float


class TerminalServerResourceCost(ServerResourceCost):
    count: int


class CostBreakdown(BaseModel):
    main_server_cost: float
    terminal_server_cost: float
    terminal_server_cal_cost: float
    duo_security_cost: float
    user_licenses_cost: float
    database_cost: float
    gateway_cost: float
    additional_costs: float
    main_server_resources: ServerResourceCost
    terminal_server_resources: Optional[TerminalServerResourceCost] = None


class AdditionalFees(BaseModel):
    setup: Optional[float] = None  # one-time
    onboarding: Optional[float] = None  # one-time
    support_access: Optional[float] = None
    support: Optional[float] = None
    storage: Optional[float] = None


class CalculationResult(BaseModel):
    """Itemized quote."""
    number_of_users: int
    vm_configuration: VmConfiguration
    subtotal: float
    additional_fees: AdditionalFees
    total: float
    currency: str
    billing_period: str
    breakdown: CostBreakdown


class OutOfRange(BaseModel):
    """Quote refused: user count outside the configured prerequisites."""
    number_of_users: int
    violated_bound: Literal["minimum", "maximum"]
    limit: int
    message: str


class QuoteRequest(BaseModel):
    """Request body for /v1/quote and the report endpoints."""
    number_of_users: int = Field(..., ge=0, le=1_000_000, description="Number of users to host")
    pricing: str = Field("default", max_length=64, description="Rate card name")


class TopologyResponse(BaseModel):
    number_of_users: int
    vm_configuration: VmConfiguration
    required_resources: RequiredResources
