# landlord_hub/services/dashboard_rollups.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..domain.compliance import ComplianceAlert, compliance_watchlist
from ..models import MaintenanceRequest, MaintenanceStatus, PropertyStatus, RentStatus
from .state_store import AppState


@dataclass(frozen=True)
class PortfolioRollup:
    total_properties: int
    occupied_properties: int
    occupancy_rate: int  # whole percent
    open_maintenance: int
    rent_overdue: int
    recent_maintenance: list[MaintenanceRequest]


def portfolio_rollup(state: AppState, *, recent_limit: int = 5) -> PortfolioRollup:
    total = len(state.properties)
    occupied = sum(1 for p in state.properties if p.status == PropertyStatus.OCCUPIED)
    rate = round(occupied / total * 100) if total > 0 else 0

    return PortfolioRollup(
        total_properties=total,
        occupied_properties=occupied,
        occupancy_rate=int(rate),
        open_maintenance=sum(1 for m in state.maintenance_requests if m.status != MaintenanceStatus.COMPLETED),
        rent_overdue=sum(1 for p in state.properties if p.rent_status == RentStatus.OVERDUE),
        recent_maintenance=list(state.maintenance_requests[:recent_limit]),
    )


def compliance_alerts(state: AppState, *, today: Optional[date] = None, window_days: int = 60) -> list[ComplianceAlert]:
    return compliance_watchlist(state.documents, today=today, window_days=window_days)
