"""Quote section builders (text/structure shared by the PDF and HTML quotes)."""
from datetime import datetime

from hostquote.formatting import billing_period_label, format_currency, format_number
from hostquote.models import CalculationResult, PricingConfig

REPORT_VERSION = "1.0.0"
PRODUCT_NAME = "MIR-RT"


def report_metadata(now: datetime | None = None) -> dict:
    """Title and export timestamp for the header."""
    now = now or datetime.now()
    return {
        "title": f"SOUMISSION D'HÉBERGEMENT CLOUD {PRODUCT_NAME}",
        "doc_name_short": f"Soumission {PRODUCT_NAME}",
        "date": now.strftime("%Y-%m-%d"),
        "date_time": now.strftime("%Y-%m-%d %H:%M"),
        "report_version": REPORT_VERSION,
    }


def export_filename(result: CalculationResult, now: datetime | None = None) -> str:
    """soumission-mirrt-14-usagers-2026-10-16.pdf"""
    now = now or datetime.now()
    return f"soumission-mirrt-{result.number_of_users}-usagers-{now.strftime('%Y-%m-%d')}.pdf"


def identification_section(result: CalculationResult) -> dict:
    return {
        "title": "INFORMATIONS",
        "lines": [
            f"Nombre d'usagers: {result.number_of_users}",
            f"Période de facturation: {billing_period_label(result.billing_period)}",
        ],
        "subtotal": None,
    }


def topology_section(result: CalculationResult) -> dict:
    vm = result.vm_configuration
    lines = [
        f"Serveur principal ({PRODUCT_NAME} + Base de données): {vm.main_server_count} VM",
        f"  - Usagers sur le serveur principal: {vm.users_on_main_server}",
    ]
    if vm.terminal_server_count > 0:
        lines.append(f"Terminal Servers: {vm.terminal_server_count} VM(s)")
        lines.append(f"  - Usagers par Terminal Server (moyenne): {format_number(vm.users_per_terminal_server, 1)}")
    lines.append(f"Total de VMs: {vm.total_vms}")
    return {"title": "CONFIGURATION DES SERVEURS VIRTUELS", "lines": lines, "subtotal": None}


def resource_totals(result: CalculationResult) -> dict:
    """Sum the per-VM resource lines over the main server and the terminal tier."""
    main = result.breakdown.main_server_resources
    term = result.breakdown.terminal_server_resources
    count = term.count if term else 0
    totals = {
        "vms": result.vm_configuration.total_vms,
        "vm_base": main.vm_base,
        "cpu_count": main.cpu_count,
        "cpus": main.cpus,
        "ram_gb": main.ram_gb,
        "ram": main.ram,
        "disk_gb": main.disk_gb,
        "disk": main.disk,
    }
    if term:
        totals["vm_base"] += term.vm_base * count
        totals["cpu_count"] += term.cpu_count * count
        totals["cpus"] += term.cpus * count
        totals["ram_gb"] += term.ram_gb * count
        totals["ram"] += term.ram * count
        totals["disk_gb"] += term.disk_gb * count
        totals["disk"] += term.disk * count
    totals["total"] = totals["vm_base"] + totals["cpus"] + totals["ram"] + totals["disk"]
    return totals


def resources_section(result: CalculationResult, config: PricingConfig) -> dict:
    cur = result.currency
    costs = config.costs
    t = resource_totals(result)
    lines = [
        f"Machines virtuelles ({t['vms']} VM × {format_currency(costs.vm_base_cost, cur)}): "
        f"{format_currency(t['vm_base'], cur)}",
        f"Processeurs ({t['cpu_count']} × {format_currency(costs.cpu_cost, cur)}): {format_currency(t['cpus'], cur)}",
        f"RAM Provisionné ({format_number(t['ram_gb'], 1)} Go × {format_currency(costs.ram_cost_per_gb, cur)}): "
        f"{format_currency(t['ram'], cur)}",
        f"Espace disque Provisionné ({format_number(t['disk_gb'], 0)} Go × {format_currency(costs.disk_cost_per_gb, cur)}): "
        f"{format_currency(t['disk'], cur)}",
    ]
    return {
        "title": "RESSOURCES INFONUAGIQUE",
        "lines": lines,
        "subtotal": f"Sous-total - Ressources Infonuagique: {format_currency(t['total'], cur)}",
    }


def licenses_section(result: CalculationResult, config: PricingConfig) -> dict | None:
    """CAL, Duo and any optional per-user or pass-through costs. None when all are zero."""
    cur = result.currency
    b = result.breakdown
    n = result.number_of_users
    costs = config.costs
    lines = []
    if b.terminal_server_cal_cost > 0:
        lines.append(
            f"CAL Terminal Serveur ({n} CAL × {format_currency(costs.terminal_server_cal_cost, cur)}): "
            f"{format_currency(b.terminal_server_cal_cost, cur)}"
        )
    if b.duo_security_cost > 0:
        lines.append(
            f"Double authentification Duo Security ({n} utilisateurs × {format_currency(costs.duo_security_cost, cur)}): "
            f"{format_currency(b.duo_security_cost, cur)}"
        )
    if b.user_licenses_cost > 0 and costs.cost_per_user is not None:
        lines.append(
            f"Licences utilisateurs ({n} × {format_currency(costs.cost_per_user, cur)}): "
            f"{format_currency(b.user_licenses_cost, cur)}"
        )
    if b.database_cost > 0:
        lines.append(f"Base de données: {format_currency(b.database_cost, cur)}")
    if b.gateway_cost > 0:
        lines.append(f"Passerelles: {format_currency(b.gateway_cost, cur)}")
    if not lines:
        return None
    total = (
        b.terminal_server_cal_cost + b.duo_security_cost + b.user_licenses_cost
        + b.database_cost + b.gateway_cost
    )
    return {
        "title": "LICENCES",
        "lines": lines,
        "subtotal": f"Sous-total - Licences: {format_currency(total, cur)}",
    }


def support_access_section(result: CalculationResult) -> dict | None:
    cur = result.currency
    fees = result.additional_fees
    if not fees.support_access or fees.support_access <= 0:
        return None
    n = result.number_of_users
    if n * 10 >= 100:
        description = f"Accès au soutien technique ({n} utilisateurs × {format_currency(10, cur)}):"
    else:
        description = f"Accès au soutien technique (minimum {format_currency(100, cur)}):"
    lines = [f"{description} {format_currency(fees.support_access, cur)}"]
    if fees.support:
        lines.append(f"Soutien mensuel: {format_currency(fees.support, cur)}")
    return {"title": "ACCÈS AU SOUTIEN TECHNIQUE", "lines": lines, "subtotal": None}


def one_time_fees_section(result: CalculationResult) -> dict | None:
    """Setup and onboarding. Listed for information, never part of the total."""
    cur = result.currency
    fees = result.additional_fees
    lines = []
    if fees.setup:
        lines.append(f"Frais d'installation: {format_currency(fees.setup, cur)}")
    if fees.onboarding:
        lines.append(f"Frais de prise en charge: {format_currency(fees.onboarding, cur)}")
    if not lines:
        return None
    return {"title": "FRAIS UNIQUES", "lines": lines, "subtotal": None}


def total_line(result: CalculationResult) -> str:
    period = billing_period_label(result.billing_period).upper()
    return f"TOTAL {period}: {format_currency(result.total, result.currency)}"


def quote_sections(result: CalculationResult, config: PricingConfig) -> list[dict]:
    """Body sections in their fixed order (the grand total is rendered separately)."""
    sections = [
        identification_section(result),
        topology_section(result),
        resources_section(result, config),
        licenses_section(result, config),
        support_access_section(result),
        one_time_fees_section(result),
    ]
    return [s for s in sections if s is not None]
