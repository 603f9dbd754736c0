"""VM topology allocation (pure functions, no I/O)."""
import math
from decimal import Decimal, ROUND_HALF_UP

from hostquote.models import PricingConfig, RequiredResources, VmCalculationRules, VmConfiguration


def round_half_up(value: float) -> int:
    """Nearest integer, ties away from zero (6.5 -> 7). round() would give 6."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def allocate(number_of_users: int, rules: VmCalculationRules) -> VmConfiguration:
    """
    Map a user count to a server topology.

    Up to max_users_on_main_server everything runs on the main server, which also
    hosts the terminal sessions. Above that, users are balanced over the fewest
    servers (main included) that keep each one within
    [min_users_per_server, max_users_per_server]:
        server_count = ceil(n / max_users_per_server)
    The main server gets round_half_up(n / server_count) users; terminal servers
    share the rest, reported as a fractional average.
    """
    if number_of_users <= rules.max_users_on_main_server:
        return VmConfiguration(
            main_server_count=1,
            terminal_server_count=0,
            total_vms=1,
            users_on_main_server=number_of_users,
            users_per_terminal_server=0,
        )

    server_count = math.ceil(number_of_users / rules.max_users_per_server)
    avg = number_of_users / server_count
    if avg < rules.min_users_per_server:
        server_count = math.ceil(number_of_users / rules.min_users_per_server)
        avg = number_of_users / server_count
    elif avg > rules.max_users_per_server:
        server_count = math.ceil(number_of_users / rules.max_users_per_server)
        avg = number_of_users / server_count

    terminal_server_count = server_count - 1
    if terminal_server_count <= 0:
        # n fits one server but exceeds the main-server cap: keep everyone on main
        return VmConfiguration(
            main_server_count=1,
            terminal_server_count=0,
            total_vms=1,
            users_on_main_server=number_of_users,
            users_per_terminal_server=0,
        )

    users_on_main = round_half_up(avg)
    users_per_terminal = (number_of_users - users_on_main) / terminal_server_count
    return VmConfiguration(
        main_server_count=1,
        terminal_server_count=terminal_server_count,
        total_vms=1 + terminal_server_count,
        users_on_main_server=users_on_main,
        users_per_terminal_server=users_per_terminal,
    )


def required_resources(vm: VmConfiguration, config: PricingConfig) -> RequiredResources:
    """Raw RAM and disk needed by a topology, before per-VM floors and base disk."""
    main = config.server_resources.main_server
    terminal = config.server_resources.terminal_server

    main_ram = main.ram + (main.database_ram or 0)
    gateways = 0  # gateway count is not an input yet
    terminal_ram = vm.terminal_server_count * (
        terminal.ram_per_user * vm.users_per_terminal_server + terminal.ram_per_gateway * gateways
    )
    main_disk = main.disk
    terminal_disk = vm.terminal_server_count * terminal.disk

    return RequiredResources(
        total_ram=main_ram + terminal_ram,
        total_disk=main_disk + terminal_disk,
        main_server_ram=main_ram,
        main_server_disk=main_disk,
        terminal_server_ram=terminal_ram,
        terminal_server_disk=terminal_disk,
    )
