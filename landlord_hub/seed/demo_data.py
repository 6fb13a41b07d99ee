# landlord_hub/seed/demo_data.py
"""
Demo portfolio loaded at start-up (settings.seed_demo_data).

Everything lives in process memory; a restart brings this set back.
"""
from __future__ import annotations

from ..models import (
    DepositScheme,
    MaintenanceRequest,
    MaintenanceStatus,
    MaintenanceUrgency,
    Property,
    PropertyStatus,
    PropertyType,
    RentStatus,
    Tenant,
    Tradesperson,
    Transaction,
    TransactionType,
)
from ..services.state_store import AppState

MANCHESTER = "123 Coronation Street, Manchester"
LONDON = "22 Baker Street, London"
EDINBURGH = "15 Princes Street, Edinburgh"
BRISTOL = "45 Broad Street, Bristol"
LIVERPOOL = "8 Abbey Road, Liverpool"


PROPERTIES = (
    Property("p1", MANCHESTER, PropertyType.PERSONAL, PropertyStatus.OCCUPIED, RentStatus.PAID, 1200.0),
    Property("p2", LONDON, PropertyType.LTD, PropertyStatus.OCCUPIED, RentStatus.OVERDUE, 2500.0),
    Property("p3", EDINBURGH, PropertyType.LTD, PropertyStatus.VACANT, RentStatus.PAID, 1500.0),
    Property("p4", BRISTOL, PropertyType.PERSONAL, PropertyStatus.OCCUPIED, RentStatus.PAID, 950.0),
    Property("p5", LIVERPOOL, PropertyType.LTD, PropertyStatus.UNDER_OFFER, RentStatus.PAID, 800.0),
)

TENANTS = (
    Tenant("t1", "John Smith", "john.smith@example.com", "07123456789", "p1", MANCHESTER,
           "2023-08-01", "2024-07-31", 1500.0, DepositScheme.DPS),
    Tenant("t2", "Jane Doe", "jane.doe@example.com", "07987654321", "p2", LONDON,
           "2022-05-15", "2024-05-14", 3000.0, DepositScheme.MY_DEPOSITS),
    Tenant("t3", "Peter Jones", "peter.jones@example.com", "07777111222", "p4", BRISTOL,
           "2024-01-10", "2025-01-09", 1100.0, DepositScheme.TDS),
)

TRADESPEOPLE = (
    Tradesperson("tp1", "Dave's Plumbing", "Plumber", "07700900111"),
    Tradesperson("tp2", "Northern Gas Services", "Gas Engineer", "07700900222"),
    Tradesperson("tp3", "Bristol Handyman Co", "General Handyman", "07700900333"),
)

MAINTENANCE = (
    MaintenanceRequest("m1", "p2", LONDON, "Leaking tap in kitchen", MaintenanceStatus.NEW,
                       MaintenanceUrgency.MEDIUM, "Plumber", "2024-05-20"),
    MaintenanceRequest("m2", "p1", MANCHESTER, "Boiler not providing hot water", MaintenanceStatus.IN_PROGRESS,
                       MaintenanceUrgency.HIGH, "Gas Engineer", "2024-05-18", assigned_tradesperson_id="tp2"),
    MaintenanceRequest("m3", "p4", BRISTOL, "Fence panel blown down in storm", MaintenanceStatus.COMPLETED,
                       MaintenanceUrgency.LOW, "General Handyman", "2024-04-10", cost=150.0,
                       assigned_tradesperson_id="tp3"),
    MaintenanceRequest("m4", "p2", LONDON, "Front door lock is sticking", MaintenanceStatus.COMPLETED,
                       MaintenanceUrgency.MEDIUM, "Locksmith", "2024-03-25", cost=85.0),
    MaintenanceRequest("m5", "p3", EDINBURGH, "End of tenancy deep clean required", MaintenanceStatus.NEW,
                       MaintenanceUrgency.LOW, "Cleaning Service", "2024-05-21"),
)


def _rent(tid: str, pid: str, addr: str, month: str, amount: float, on: str) -> Transaction:
    return Transaction(tid, pid, addr, TransactionType.INCOME, f"{month} Rent", amount, on)


TRANSACTIONS = (
    _rent("tr1", "p1", MANCHESTER, "May", 1200.0, "2024-05-01"),
    _rent("tr2", "p2", LONDON, "May", 2500.0, "2024-05-01"),
    _rent("tr3", "p4", BRISTOL, "May", 950.0, "2024-05-01"),
    _rent("tr4", "p1", MANCHESTER, "April", 1200.0, "2024-04-01"),
    _rent("tr5", "p2", LONDON, "April", 2500.0, "2024-04-01"),
    _rent("tr6", "p4", BRISTOL, "April", 950.0, "2024-04-01"),
    Transaction("tr7", "p4", BRISTOL, TransactionType.EXPENSE, "Fence Repair", 150.0, "2024-04-12"),
    _rent("tr8", "p1", MANCHESTER, "March", 1200.0, "2024-03-01"),
    _rent("tr9", "p2", LONDON, "March", 2500.0, "2024-03-01"),
    _rent("tr10", "p4", BRISTOL, "March", 950.0, "2024-03-01"),
    Transaction("tr11", "p2", LONDON, TransactionType.EXPENSE, "Locksmith for front door", 85.0, "2024-03-26"),
    Transaction("tr12", "p3", EDINBURGH, TransactionType.EXPENSE, "Gas Safety Certificate", 75.0, "2024-03-15"),
)


def demo_state() -> AppState:
    return AppState(
        properties=PROPERTIES,
        tenants=TENANTS,
        maintenance_requests=MAINTENANCE,
        transactions=tuple(sorted(TRANSACTIONS, key=lambda t: t.date, reverse=True)),
        documents=(),
        tradespeople=TRADESPEOPLE,
    )
