# scripts/seed_demo.py
"""Load demo stock into a running backend: scooter models with units, spare parts, one booking."""

import argparse
import requests
from datetime import date

DEFAULT_BACKEND = "http://127.0.0.1:8080/api/v1"

VEHICLES = [
    {"name": "Zeal", "model": "ZX-60", "price": 62000, "engine_capacity": "250W",
     "specifications": "60V 28Ah lithium", "colors": ["Blue", "Navy Blue"]},
    {"name": "Breeze", "model": "BR-48", "price": 54000, "engine_capacity": "250W",
     "specifications": "48V 24Ah lead acid", "colors": ["Sky Blue"]},
]

SPARE_PARTS = [
    {"name": "Brake shoe set", "part_number": "BRK-001", "quantity": 24, "price": 350,
     "category": "Brakes", "manufacturer": "Minda", "location": "Rack A1"},
    {"name": "Throttle assembly", "part_number": "THR-010", "quantity": 4, "price": 780,
     "category": "Electricals", "manufacturer": "Generic", "location": "Rack B2"},
    {"name": "48V charger", "part_number": "CHG-048", "quantity": 9, "price": 1650,
     "category": "Charging", "manufacturer": "Lectrix", "location": "Counter"},
]


def make_units(prefix: str, colors: list[str], count: int) -> list[dict]:
    return [
        {"motor_no": f"{prefix}M{n:04d}", "chassis_no": f"{prefix}C{n:04d}",
         "battery_no": f"{prefix}B{n:04d}", "controller_no": f"{prefix}K{n:04d}",
         "color": colors[n % len(colors)]}
        for n in range(1, count + 1)
    ]


def post(session: requests.Session, url: str, payload) -> dict:
    resp = session.post(url, json=payload, timeout=10)
    resp.raise_for_status()
    return resp.json()


def seed(backend: str, units_per_model: int, api_key: str = None):
    session = requests.Session()
    if api_key:
        session.headers["X-API-Key"] = api_key

    for v in VEHICLES:
        body = {k: v[k] for k in ("name", "model", "price", "engine_capacity", "specifications")}
        body["quantity"] = units_per_model
        body["units"] = make_units(v["model"].replace("-", ""), v["colors"], units_per_model)
        created = post(session, f"{backend}/vehicles", body)
        print(f"✅ Vehicle {created['name']} {created['model']} → id={created['id']} qty={created['quantity']}")

    for part in SPARE_PARTS:
        created = post(session, f"{backend}/spare-parts", part)
        flag = " ⚠️ low stock" if created["is_low_stock"] else ""
        print(f"✅ Part {created['part_number']} qty={created['quantity']}{flag}")

    booking = post(session, f"{backend}/services", {
        "customer_name": "Demo Customer", "phone": "9000000000", "bike_model": "Zeal ZX-60",
        "battery_health": 82, "service_type": "Battery Service", "date": str(date.today()),
    })
    print(f"✅ Service booking id={booking['id']} status={booking['status']}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo data through the HTTP API")
    parser.add_argument("--backend", default=DEFAULT_BACKEND)
    parser.add_argument("--units", type=int, default=3, help="units per vehicle model")
    parser.add_argument("--api-key", default=None)
    args = parser.parse_args()
    seed(args.backend, args.units, args.api_key)
