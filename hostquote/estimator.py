"""Cost estimation for a VM topology (pure functions)."""
from hostquote.allocator import allocate
from hostquote.models import (
    AdditionalFees,
    CalculationResult,
    CostBreakdown,
    OutOfRange,
    Prerequisites,
    PricingConfig,
    ServerResourceCost,
    TerminalServerResourceCost,
    VmConfiguration,
)

BASE_DISK_GB = 100  # added to every VM, whatever its role
DEFAULT_TERMINAL_MIN_RAM_GB = 12

ONBOARDING_BASE_FEE = 1000
ONBOARDING_INCLUDED_USERS = 10
ONBOARDING_FEE_PER_EXTRA_USER = 100

SUPPORT_ACCESS_PER_USER = 10
SUPPORT_ACCESS_MINIMUM = 100


def prerequisite_violation(number_of_users: int, prerequisites: Prerequisites) -> OutOfRange | None:
    """Return the violated bound, or None when the user count is acceptable."""
    min_users = prerequisites.min_users if prerequisites.min_users is not None else 1
    min_users = max(min_users, 1)
    if number_of_users < min_users:
        return OutOfRange(
            number_of_users=number_of_users,
            violated_bound="minimum",
            limit=min_users,
            message=f"Le nombre minimum d'usagers est de {min_users}",
        )
    if prerequisites.max_users is not None and number_of_users > prerequisites.max_users:
        return OutOfRange(
            number_of_users=number_of_users,
            violated_bound="maximum",
            limit=prerequisites.max_users,
            message=f"Le nombre maximum d'usagers est de {prerequisites.max_users}",
        )
    return None


def _vm_cost(config: PricingConfig, cpus: int, ram_gb: float, disk_gb: float) -> ServerResourceCost:
    """vm_base + cpu_cost * cpus + ram_rate * ram + disk_rate * disk"""
    costs = config.costs
    vm_base = costs.vm_base_cost
    cpu = costs.cpu_cost * cpus
    ram = costs.ram_cost_per_gb * ram_gb
    disk = costs.disk_cost_per_gb * disk_gb
    return ServerResourceCost(
        vm_base=vm_base,
        cpus=cpu,
        ram=ram,
        disk=disk,
        total=vm_base + cpu + ram + disk,
        cpu_count=cpus,
        ram_gb=ram_gb,
        disk_gb=disk_gb,
    )


def onboarding_fee(number_of_users: int) -> float:
    """One-time: 1000 for the first 10 users, +100 per additional user."""
    extra = max(0, number_of_users - ONBOARDING_INCLUDED_USERS)
    return float(ONBOARDING_BASE_FEE + extra * ONBOARDING_FEE_PER_EXTRA_USER)


def support_access_fee(number_of_users: int) -> float:
    """Recurring: 10 per user, minimum 100."""
    return float(max(number_of_users * SUPPORT_ACCESS_PER_USER, SUPPORT_ACCESS_MINIMUM))


def estimate(
    number_of_users: int,
    vm: VmConfiguration,
    config: PricingConfig,
) -> CalculationResult | None:
    """
    Price a topology against the rate card.

    Returns None when number_of_users is outside config.prerequisites.
    subtotal = servers + CAL + Duo + user licenses + database + gateway
    total = subtotal + support access + flat support
    One-time fees (setup, onboarding) are reported but never added to total.
    """
    if prerequisite_violation(number_of_users, config.prerequisites) is not None:
        return None

    resources = config.server_resources
    costs = config.costs
    specs = costs.vm_specs
    ram_per_user = resources.terminal_server.ram_per_user

    # Main server: database RAM plus its own user sessions, floored
    main_ram = resources.main_server.database_ram or 0
    if vm.users_on_main_server > 0:
        main_ram += vm.users_on_main_server * ram_per_user
    main_ram = max(main_ram, specs.main_server.min_ram)
    main = _vm_cost(
        config,
        specs.main_server.cpus,
        main_ram,
        BASE_DISK_GB + resources.main_server.disk,
    )

    terminal = None
    terminal_server_cost = 0.0
    if vm.terminal_server_count > 0:
        min_ram = specs.terminal_server.min_ram
        if min_ram is None:
            min_ram = DEFAULT_TERMINAL_MIN_RAM_GB
        terminal_ram = max(vm.users_per_terminal_server * ram_per_user, min_ram)
        per_vm = _vm_cost(
            config,
            specs.terminal_server.cpus,
            terminal_ram,
            BASE_DISK_GB + resources.terminal_server.disk,
        )
        terminal = TerminalServerResourceCost(**per_vm.model_dump(), count=vm.terminal_server_count)
        terminal_server_cost = per_vm.total * vm.terminal_server_count

    # Licenses are per user, whichever server hosts the session
    cal_cost = number_of_users * costs.terminal_server_cal_cost
    duo_cost = number_of_users * costs.duo_security_cost

    user_licenses_cost = 0.0
    if costs.cost_per_user is not None:
        user_licenses_cost = number_of_users * costs.cost_per_user
    database_cost = costs.database_cost if costs.database_cost is not None else 0.0
    gateway_cost = costs.gateway_cost if costs.gateway_cost is not None else 0.0

    fees = AdditionalFees(
        onboarding=onboarding_fee(number_of_users),
        support_access=support_access_fee(number_of_users),
    )
    additional_costs = fees.support_access
    flat = costs.additional_fees
    if flat is not None:
        if flat.setup is not None:
            fees.setup = flat.setup
        if flat.support is not None:
            fees.support = flat.support
            additional_costs += flat.support
        # flat.storage needs a GB quantity nobody supplies; it stays unpriced

    subtotal = (
        main.total
        + terminal_server_cost
        + cal_cost
        + duo_cost
        + user_licenses_cost
        + database_cost
        + gateway_cost
    )
    total = subtotal + additional_costs

    return CalculationResult(
        number_of_users=number_of_users,
        vm_configuration=vm,
        subtotal=subtotal,
        additional_fees=fees,
        total=total,
        currency=config.currency,
        billing_period=config.billing_period,
        breakdown=CostBreakdown(
            main_server_cost=main.total,
            terminal_server_cost=terminal_server_cost,
            terminal_server_cal_cost=cal_cost,
            duo_security_cost=duo_cost,
            user_licenses_cost=user_licenses_cost,
            database_cost=database_cost,
            gateway_cost=gateway_cost,
            additional_costs=additional_costs,
            main_server_resources=main,
            terminal_server_resources=terminal,
        ),
    )


def calculate_cost(number_of_users: int, config: PricingConfig) -> CalculationResult | None:
    """Check prerequisites, allocate VMs, then price them. None when out of range."""
    if prerequisite_violation(number_of_users, config.prerequisites) is not None:
        return None
    vm = allocate(number_of_users, config.vm_calculation)
    return estimate(number_of_users, vm, config)


def quote(number_of_users: int, config: PricingConfig) -> CalculationResult | OutOfRange:
    """Like calculate_cost, but say which bound was violated instead of returning None."""
    violation = prerequisite_violation(number_of_users, config.prerequisites)
    if violation is not None:
        return violation
    vm = allocate(number_of_users, config.vm_calculation)
    return estimate(number_of_users, vm, config)
