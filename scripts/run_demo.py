#!/usr/bin/env python3
"""
run_demo.py - End-to-end demo for the ShipTrack API
- Registers/logs in a demo user
- Creates a shipment with a generated tracking number
- Shows status counts before and after marking it Delivered
- Deletes the shipment twice (204, then 404)
"""

import argparse
import json
import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, List

import requests


class DemoRunner:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.auth_url = f"{self.base_url}/api/auth"
        self.shipments_url = f"{self.base_url}/api/shipments"

        self.email = os.getenv("DEMO_EMAIL", "a@x.com")
        self.password = os.getenv("DEMO_PASSWORD", "secret1")

        self.token: Optional[str] = None

    # ---------- helpers ----------
    def show_step(self, title: str):
        print(f"\n=== {title} ===")

    def mask_token(self, token: str) -> str:
        if not token:
            return "<none>"
        return token if len(token) <= 12 else f"{token[:8]}...{token[-6:]}"

    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def call_api(
        self,
        method: str,
        url: str,
        data: Optional[Any] = None,
        expected_status: List[int] = [200, 201, 204],
        timeout: int = 30,
    ):
        print(f"\n-> {method} {url}")
        if data is not None:
            print(f"   Body: {json.dumps(data, indent=2)}")

        try:
            resp = requests.request(method=method, url=url, headers=self.headers(), json=data, timeout=timeout)
        except requests.exceptions.RequestException as e:
            print(f"   Error: \033[91m{e}\033[0m")
            return {"status": None, "data": None, "error": str(e)}

        status_color = "\033[92m" if resp.status_code in expected_status else "\033[93m"
        print(f"   Status: {status_color}{resp.status_code}\033[0m")
        try:
            js = resp.json()
            print("   JSON:")
            print(json.dumps(js, indent=2))
            return {"status": resp.status_code, "data": js}
        except ValueError:
            return {"status": resp.status_code, "data": None}

    # ---------- flow ----------
    def run_demo(self):
        print("Starting ShipTrack Demo")
        print("=" * 50)

        self.show_step("Preflight: service health")
        self.call_api("GET", f"{self.base_url}/health", expected_status=[200])

        self.show_step("Register")
        self.call_api(
            "POST",
            f"{self.auth_url}/register",
            data={"email": self.email, "password": self.password},
            expected_status=[201, 409],
        )

        self.show_step("Login")
        lr = self.call_api("POST", f"{self.auth_url}/login", data={"email": self.email, "password": self.password})
        if lr.get("data"):
            self.token = lr["data"].get("token")
            print(f"Access token: {self.mask_token(self.token)}")
        if not self.token:
            print("\033[91mLogin failed; is JWT_SECRET set on the server?\033[0m")
            return

        self.show_step("Create shipment (generated tracking number)")
        eta = (datetime.now(timezone.utc) + timedelta(days=3)).isoformat()
        cr = self.call_api(
            "POST",
            self.shipments_url,
            data={"customerName": "Acme", "currentLocation": "Oslo", "eta": eta},
            expected_status=[201],
        )
        shipment_id = (cr.get("data") or {}).get("id")
        print(f"Shipment ID: {shipment_id}")

        self.show_step("Stats")
        self.call_api("GET", f"{self.shipments_url}/stats")

        if shipment_id:
            self.show_step("Mark delivered")
            self.call_api("PATCH", f"{self.shipments_url}/{shipment_id}/status", data={"status": "Delivered"})

            self.show_step("Stats after delivery")
            self.call_api("GET", f"{self.shipments_url}/stats")

            self.show_step("List (status=Delivered)")
            self.call_api("GET", f"{self.shipments_url}?status=Delivered&pageSize=5")

            self.show_step("Delete twice")
            self.call_api("DELETE", f"{self.shipments_url}/{shipment_id}", expected_status=[204])
            self.call_api("DELETE", f"{self.shipments_url}/{shipment_id}", expected_status=[404])
        else:
            print("Skipping status/delete steps - no shipment created")

        print("\n\033[92m=== DEMO COMPLETE ===\033[0m")


if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default=os.getenv("SHIPTRACK_URL", "http://localhost:8000"))
    args = ap.parse_args()
    DemoRunner(args.base_url).run_demo()
