"""
Monthly Energy Balance Engine - ISO 13790 quasi-steady-state method.

For each calendar month the engine balances average heat flows of the
compiled building:

    losses   Q_ht = H × (θ_set − θ_e) × t
    gains    Q_gn = Q_sol + Q_int
    heating  Q_H,nd = Q_ht − η_H,gn × Q_gn
    cooling  Q_C,nd = Q_gn − η_C,ls × Q_ht

η are the dynamic utilization factors, which depend on the gain/loss ratio
and on the building time constant τ = C / H.

Everything here is per m² of floor area: H in W/m²K, gains and needs in
kWh/m². Given a compiled model the engine cannot fail; every intermediate is
finite and delivered energy is never negative.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Mapping, Tuple
import logging

from ..core.end_uses import EndUse, END_USES
from ..geometry.envelope import ORIENTATIONS
from ..schedules.profiles import days_in_month, hours_in_month

if TYPE_CHECKING:
    from .sim_model import SimModel

logger = logging.getLogger(__name__)

# Ratios this close to 1 use the limit value a/(a+1)
_RATIO_TOLERANCE = 1e-6


@dataclass(frozen=True)
class UtilizationParameters:
    """Numerical parameters of the utilization factors (ISO 13790 §12.2.1)."""
    a0: float = 1.0                         # Reference numerical parameter
    tau0_hours: float = 15.0                # Reference time constant (h)
    heating_gain_loss_limit: float = 2.0    # γ above which no heating is needed
    cooling_loss_gain_limit: float = 2.0    # 1/λ above which no cooling is needed

    def numerical_parameter(self, time_constant_hours: float) -> float:
        """a = a0 + τ / τ0"""
        return self.a0 + time_constant_hours / self.tau0_hours


def gain_utilization(ratio: float, a: float) -> float:
    """
    Utilization factor for a source/sink ratio (ISO 13790 eq. 52-54).

    For heating, ``ratio`` is γ = gains / losses and the result is η_H,gn.
    Cooling uses the same curve with the inverse ratio, see
    ``loss_utilization``.

        ratio ≤ 0      -> 1
        ratio = 1      -> a / (a + 1)
        otherwise      -> (1 − ratio^a) / (1 − ratio^(a+1))

    Asymptotes: η -> 1 as ratio -> 0 (every watt of gain is useful when losses
    dominate), η ~ 1/ratio as ratio -> ∞ (useful gain approaches the loss).
    η is non-increasing in ratio and η × ratio ≤ 1.
    """
    if ratio <= 0.0:
        return 1.0
    if abs(ratio - 1.0) < _RATIO_TOLERANCE:
        return a / (a + 1.0)
    if ratio > 1.0:
        # Same expression scaled by ratio^-(a+1); powers stay ≤ 1
        inverse = 1.0 / ratio
        return (inverse - inverse ** (a + 1.0)) / (1.0 - inverse ** (a + 1.0))
    return (1.0 - ratio ** a) / (1.0 - ratio ** (a + 1.0))


def loss_utilization(gain_loss_ratio: float, a: float) -> float:
    """
    Cooling loss utilization η_C,ls for λ = gains / losses (ISO 13790 eq. 64-66).

        λ = 1          -> a / (a + 1)
        otherwise      -> (1 − λ^−a) / (1 − λ^−(a+1))

    which is ``gain_utilization(1/λ, a)``. Non-positive λ (no gains, or a
    negative loss) -> 1.
    """
    if gain_loss_ratio <= 0.0:
        return 1.0
    return gain_utilization(1.0 / gain_loss_ratio, a)


@dataclass(frozen=True)
class MonthlyEnergyBalance:
    """Heat balance of one month plus the delivered energy per end use."""
    month: int
    hours: float
    outdoor_temperature: float          # °C
    heating_setpoint: float             # °C, schedule-weighted
    cooling_setpoint: float             # °C, schedule-weighted
    heat_transfer_coefficient: float    # W/m²K
    time_constant: float                # h
    heating_losses: float               # kWh/m²
    cooling_losses: float               # kWh/m²
    solar_gains: float                  # kWh/m²
    internal_gains: float               # kWh/m²
    heating_utilization: float
    cooling_utilization: float
    heating_need: float                 # kWh/m² useful
    cooling_need: float                 # kWh/m² useful
    delivered: Mapping[EndUse, float]   # kWh/m² delivered

    @property
    def total_gains(self) -> float:
        return self.solar_gains + self.internal_gains

    @property
    def gain_loss_ratio(self) -> float:
        if self.heating_losses <= 0.0:
            return float("inf")
        return self.total_gains / self.heating_losses


def heating_need(losses: float, gains: float, a: float, params: UtilizationParameters) -> Tuple[float, float]:
    """Useful heating need and the gain utilization used (kWh/m², -)."""
    if losses <= 0.0:
        return 0.0, 0.0
    ratio = gains / losses
    utilization = gain_utilization(ratio, a)
    if ratio > params.heating_gain_loss_limit:
        return 0.0, utilization
    return max(0.0, losses - utilization * gains), utilization


def cooling_need(losses: float, gains: float, a: float, params: UtilizationParameters) -> Tuple[float, float]:
    """Useful cooling need and the loss utilization used (kWh/m², -)."""
    if gains <= 0.0:
        return 0.0, 1.0
    if losses <= 0.0:
        # Outdoors is warmer than the setpoint: every gain and the inflow count
        return gains - losses, 1.0
    utilization = loss_utilization(gains / losses, a)
    if losses / gains > params.cooling_loss_gain_limit:
        return 0.0, utilization
    return max(0.0, gains - utilization * losses), utilization


class MonthlyEnergyBalanceEngine:
    """
    Twelve monthly heat balances for a compiled model.

    Usage:
        engine = MonthlyEnergyBalanceEngine(sim_model)
        balances = engine.run()
        january = balances[0]
        print(january.heating_need, january.delivered[EndUse.HEATING])
    """

    def __init__(self, model: "SimModel"):
        self.model = model

    def run(self) -> Tuple[MonthlyEnergyBalance, ...]:
        model = self.model
        dhw_shares = self._hot_water_shares()
        balances = tuple(self.balance(month, dhw_shares[month - 1]) for month in range(1, 13))
        logger.debug(
            f"Balanced 12 months for '{model.name or 'building'}': "
            f"heating {sum(b.heating_need for b in balances):.1f}, "
            f"cooling {sum(b.cooling_need for b in balances):.1f} kWh/m² useful",
            extra={"building": model.name},
        )
        return balances

    def balance(self, month: int, dhw_share: float = 0.0) -> MonthlyEnergyBalance:
        """
        Heat balance for one calendar month.

        Args:
            month: 1-12
            dhw_share: Fraction of the annual hot water demand falling in this month
        """
        model = self.model
        climate = model.climate[month]
        hours = hours_in_month(month, model.year)

        hvac = model.schedule("hvac").fraction(month)
        theta_h = hvac * model.heating_setpoint + (1.0 - hvac) * model.heating_setback
        theta_c = hvac * model.cooling_setpoint + (1.0 - hvac) * model.cooling_setback
        theta_e = climate.mean_temperature

        h = model.specific_heat_transfer(hvac)
        q_ht_h = h * (theta_h - theta_e) * hours / 1000.0
        q_ht_c = h * (theta_c - theta_e) * hours / 1000.0

        q_sol = self._solar_gains(climate)
        q_int = self._internal_gain_power(month) * hours / 1000.0
        q_gn = q_sol + q_int

        tau = model.specific_heat_capacity / (3600.0 * h) if h > 0.0 else 0.0
        a = model.utilization.numerical_parameter(tau)

        q_h, eta_h = heating_need(q_ht_h, q_gn, a, model.utilization)
        q_c, eta_c = cooling_need(q_ht_c, q_gn, a, model.utilization)

        delivered = self._delivered(month, hours, q_h, q_c, dhw_share)
        return MonthlyEnergyBalance(
            month=month,
            hours=hours,
            outdoor_temperature=theta_e,
            heating_setpoint=theta_h,
            cooling_setpoint=theta_c,
            heat_transfer_coefficient=h,
            time_constant=tau,
            heating_losses=q_ht_h,
            cooling_losses=q_ht_c,
            solar_gains=q_sol,
            internal_gains=q_int,
            heating_utilization=eta_h,
            cooling_utilization=eta_c,
            heating_need=q_h,
            cooling_need=q_c,
            delivered=MappingProxyType(delivered),
        )

    # =========================================================================
    # Gains
    # =========================================================================

    def _solar_gains(self, climate) -> float:
        """Solar gain through glazing (kWh/m² floor)."""
        model = self.model
        total = sum(
            model.solar_aperture[o] * climate.solar[o] for o in ORIENTATIONS
        )
        return total / model.floor_area

    def _internal_gain_power(self, month: int) -> float:
        """Average internal gain over the month (W/m²)."""
        model = self.model
        lighting = (
            model.lighting_power_density
            * model.lighting_control_factor
            * model.schedule("lighting").fraction(month)
        )
        equipment = model.equipment_power_density * model.schedule("equipment").fraction(month)
        people = model.occupant_gain_density * model.schedule("occupancy").fraction(month)
        return lighting + equipment + people

    # =========================================================================
    # Delivered energy
    # =========================================================================

    def _hot_water_shares(self) -> Tuple[float, ...]:
        """Monthly shares of the annual hot water demand (days × schedule)."""
        model = self.model
        schedule = model.schedule("hot_water")
        weights = [
            days_in_month(month, model.year) * schedule.fraction(month)
            for month in range(1, 13)
        ]
        total = sum(weights)
        if total <= 0.0:
            return (0.0,) * 12
        return tuple(w / total for w in weights)

    def _delivered(
        self,
        month: int,
        hours: float,
        heating: float,
        cooling: float,
        dhw_share: float,
    ) -> Dict[EndUse, float]:
        model = self.model
        active = model.active_end_uses
        hvac = model.schedule("hvac").fraction(month)

        useful = {
            EndUse.HEATING: heating,
            EndUse.COOLING: cooling,
            EndUse.WATER_SYSTEMS: model.dhw_demand * dhw_share,
        }
        fixed_power = {
            EndUse.INTERIOR_LIGHTING: (
                model.lighting_power_density
                * model.lighting_control_factor
                * model.schedule("lighting").fraction(month)
            ),
            EndUse.EXTERIOR_LIGHTING: (
                model.exterior_lighting_power / model.floor_area
                * model.schedule("exterior_lighting").fraction(month)
            ),
            EndUse.INTERIOR_EQUIPMENT: (
                model.equipment_power_density * model.schedule("equipment").fraction(month)
            ),
            EndUse.FANS: model.fan_power_density * hvac,
            EndUse.PUMPS: model.pump_power_density * hvac,
        }

        delivered: Dict[EndUse, float] = {}
        for end_use in END_USES:
            if end_use not in active:
                delivered[end_use] = 0.0
            elif end_use in useful:
                delivered[end_use] = max(0.0, useful[end_use]) / model.efficiency[end_use]
            else:
                delivered[end_use] = max(0.0, fixed_power[end_use] * hours / 1000.0)
        return delivered
