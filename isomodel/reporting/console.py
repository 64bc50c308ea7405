"""
Console reporting of simulation results with rich.

Usage:
    from isomodel.reporting import print_results

    results = sim_model.simulate()
    print_results(results)
"""

import calendar
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..core.end_uses import END_USES, FUEL_TYPES, FuelType
from ..simulation.results import Results


def _used_fuels(results: Results):
    """Fuel types with any energy, in canonical order (all of them if none)."""
    used = [f for f in FUEL_TYPES if results.annual_by_fuel_type(f) > 0]
    return used or list(FUEL_TYPES)


def results_table(results: Results, title: Optional[str] = None) -> Table:
    """Months × fuel types (kWh/m²), with a total row."""
    fuels = _used_fuels(results)
    table = Table(title=title or f"{results.name or 'Building'} - delivered energy (kWh/m²)")
    table.add_column("Month", style="cyan")
    for fuel in fuels:
        table.add_column(fuel.label, justify="right")
    table.add_column("Total", justify="right", style="bold")

    for monthly in results:
        row = [calendar.month_abbr[monthly.month]]
        row += [f"{monthly.get_end_use_by_fuel_type(f):.2f}" for f in fuels]
        row.append(f"{monthly.total:.2f}")
        table.add_row(*row)

    table.add_section()
    totals = ["Year"] + [f"{results.annual_by_fuel_type(f):.1f}" for f in fuels]
    totals.append(f"{results.total_energy_use:.1f}")
    table.add_row(*totals, style="bold")
    return table


def end_use_table(results: Results) -> Table:
    """Annual end uses (kWh/m² and share of total)."""
    table = Table(title="Annual end uses")
    table.add_column("End use", style="cyan")
    table.add_column("Fuel", style="dim")
    table.add_column("kWh/m²", justify="right")
    table.add_column("Share", justify="right")

    total = results.total_energy_use
    fuel_types = results[1].fuel_types
    for end_use in END_USES:
        value = results.annual_end_use(end_use)
        if value <= 0:
            continue
        fuel: Optional[FuelType] = fuel_types.get(end_use)
        table.add_row(
            end_use.label,
            fuel.label if fuel else "-",
            f"{value:.1f}",
            f"{value / total:.0%}" if total > 0 else "-",
        )
    return table


def print_results(results: Results, console: Optional[Console] = None) -> None:
    """Print the monthly fuel table, the end-use table and the EUI."""
    console = console or Console()
    console.print(results_table(results))
    console.print(end_use_table(results))
    console.print(
        f"\n[bold]EUI:[/bold] {results.total_energy_use:.1f} kWh/m²/year "
        f"over {results.floor_area:,.0f} m² "
        f"({results.absolute_total_energy_use() / 1000:,.1f} MWh)"
    )
