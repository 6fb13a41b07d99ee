# landlord_hub/cli/__main__.py
from __future__ import annotations

import argparse
import json
from datetime import date
from pathlib import Path

from landlord_hub.config import settings
from landlord_hub.deps import initial_state
from landlord_hub.services.dashboard_rollups import compliance_alerts
from landlord_hub.services.export_service import export_maintenance, export_properties, export_transactions


def _export(entity: str, fmt: str, out_dir: Path) -> Path:
    state = initial_state()
    today = date.today()
    if entity == "properties":
        artifact = export_properties(state.properties, fmt, today=today)
    elif entity == "transactions":
        artifact = export_transactions(state.transactions, fmt, today=today)
    else:
        artifact = export_maintenance(state.maintenance_requests, state.tradespeople, fmt, today=today)

    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / artifact.filename
    path.write_bytes(artifact.content)
    return path


def main() -> None:
    p = argparse.ArgumentParser(prog="landlord_hub")
    sub = p.add_subparsers(dest="cmd", required=True)

    ex = sub.add_parser("export", help="write an export file for the seeded portfolio")
    ex.add_argument("entity", choices=["properties", "transactions", "maintenance"])
    ex.add_argument("--format", dest="fmt", default="csv", choices=["csv", "pdf"])
    ex.add_argument("--out-dir", default=settings.export_dir)

    cp = sub.add_parser("compliance", help="list documents expiring soon")
    cp.add_argument("--window-days", type=int, default=settings.dashboard_compliance_window_days)

    args = p.parse_args()

    if args.cmd == "export":
        path = _export(args.entity, args.fmt, Path(args.out_dir))
        print(json.dumps({"ok": True, "path": str(path)}))
        return

    alerts = compliance_alerts(initial_state(), today=date.today(), window_days=args.window_days)
    print(
        json.dumps(
            [
                {
                    "document_id": a.document_id,
                    "file_name": a.file_name,
                    "expiry_date": a.expiry_date,
                    "status": a.compliance.status,
                    "days_left": a.compliance.days_left,
                }
                for a in alerts
            ],
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
