"""Tests for quote sections, PDF and HTML export."""
from datetime import datetime

import pytest

from hostquote.estimator import calculate_cost
from hostquote.models import PricingConfig
from hostquote.report.html_report import generate_quote_html
from hostquote.report.pdf import generate_quote_pdf
from hostquote.report.templates import (
    export_filename,
    quote_sections,
    report_metadata,
    resource_totals,
    total_line,
)

NBSP = "\u00a0"
FIXED_NOW = datetime(2026, 3, 14, 9, 30)


def _titles(sections):
    return [s["title"] for s in sections]


def test_section_order_multi_server(default_config):
    result = calculate_cost(14, default_config)
    assert _titles(quote_sections(result, default_config)) == [
        "INFORMATIONS",
        "CONFIGURATION DES SERVEURS VIRTUELS",
        "RESSOURCES INFONUAGIQUE",
        "LICENCES",
        "ACCÈS AU SOUTIEN TECHNIQUE",
        "FRAIS UNIQUES",
    ]


def test_identification_lines(default_config):
    result = calculate_cost(5, default_config)
    info = quote_sections(result, default_config)[0]
    assert info["lines"] == ["Nombre d'usagers: 5", "Période de facturation: Mensuel"]


def test_topology_lines(default_config):
    single = quote_sections(calculate_cost(5, default_config), default_config)[1]
    assert not any("Terminal Servers" in line for line in single["lines"])
    assert single["lines"][-1] == "Total de VMs: 1"

    multi = quote_sections(calculate_cost(27, default_config), default_config)[1]
    assert "Terminal Servers: 2 VM(s)" in multi["lines"]
    assert multi["lines"][-1] == "Total de VMs: 3"


def test_resource_totals(default_config):
    result = calculate_cost(14, default_config)
    t = resource_totals(result)
    assert t["vms"] == 2
    assert t["cpu_count"] == 6
    assert t["ram_gb"] == 24
    assert t["disk_gb"] == 210
    assert t["total"] == pytest.approx(result.breakdown.main_server_cost + result.breakdown.terminal_server_cost)


def test_resource_lines(default_config):
    result = calculate_cost(14, default_config)
    resources = quote_sections(result, default_config)[2]
    assert f"Processeurs (6 × 32,10{NBSP}$): 192,60{NBSP}$" in resources["lines"]
    assert f"RAM Provisionné (24,0 Go × 6,80{NBSP}$): 163,20{NBSP}$" in resources["lines"]
    assert resources["subtotal"] == f"Sous-total - Ressources Infonuagique: 401,50{NBSP}$"


def test_license_lines(default_config):
    result = calculate_cost(14, default_config)
    licenses = quote_sections(result, default_config)[3]
    assert licenses["lines"][0] == f"CAL Terminal Serveur (14 CAL × 11,36{NBSP}$): 159,04{NBSP}$"
    assert licenses["subtotal"] == f"Sous-total - Licences: 299,04{NBSP}$"


def test_optional_costs_listed_with_licenses(config_dict):
    config_dict["costs"]["database_cost"] = 40
    config = PricingConfig.model_validate(config_dict)
    result = calculate_cost(5, config)
    licenses = quote_sections(result, config)[3]
    assert f"Base de données: 40,00{NBSP}$" in licenses["lines"]


def test_support_access_description(default_config):
    small = quote_sections(calculate_cost(5, default_config), default_config)[4]
    assert "minimum" in small["lines"][0]
    large = quote_sections(calculate_cost(14, default_config), default_config)[4]
    assert "14 utilisateurs" in large["lines"][0]
    assert large["lines"][0].endswith(f"140,00{NBSP}$")


def test_one_time_fees(config_dict):
    config_dict["costs"]["additional_fees"]["setup"] = 250
    config = PricingConfig.model_validate(config_dict)
    fees = quote_sections(calculate_cost(12, config), config)[-1]
    assert fees["title"] == "FRAIS UNIQUES"
    assert fees["lines"] == [
        f"Frais d'installation: 250,00{NBSP}$",
        f"Frais de prise en charge: 1{NBSP}200,00{NBSP}$",
    ]


def test_total_line(default_config):
    assert total_line(calculate_cost(5, default_config)) == f"TOTAL MENSUEL: 407,55{NBSP}$"


def test_export_filename(default_config):
    result = calculate_cost(14, default_config)
    assert export_filename(result, FIXED_NOW) == "soumission-mirrt-14-usagers-2026-03-14.pdf"


def test_report_metadata():
    meta = report_metadata(FIXED_NOW)
    assert meta["title"] == "SOUMISSION D'HÉBERGEMENT CLOUD MIR-RT"
    assert meta["date_time"] == "2026-03-14 09:30"


def test_generate_pdf(default_config):
    result = calculate_cost(40, default_config)
    pdf = generate_quote_pdf(result, default_config, now=FIXED_NOW)
    assert pdf[:4] == b"%PDF"
    assert len(pdf) > 1000


def test_generate_html_sections_in_order(default_config):
    result = calculate_cost(14, default_config)
    html = generate_quote_html(result, default_config, now=FIXED_NOW)
    assert html.startswith("<!DOCTYPE html>")
    positions = [
        html.index(title)
        for title in (
            "INFORMATIONS",
            "CONFIGURATION DES SERVEURS VIRTUELS",
            "RESSOURCES INFONUAGIQUE",
            "LICENCES",
            "ACCÈS AU SOUTIEN TECHNIQUE",
            "FRAIS UNIQUES",
            "TOTAL MENSUEL",
        )
    ]
    assert positions == sorted(positions)
    assert "window.print()" in html


def test_generate_html_pdf_link(default_config):
    result = calculate_cost(5, default_config)
    html = generate_quote_html(result, default_config, pdf_download_url="/quote.pdf")
    assert 'href="/quote.pdf"' in html
