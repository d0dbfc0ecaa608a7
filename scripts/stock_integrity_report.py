#!/usr/bin/env python3
"""
Stock Integrity Report
Recalcula el stock de todos los items vía API y revisa la consistencia de los datos
"""

import requests
from typing import Dict, List

def fetch_recalculation(base_url: str, include_inactive: bool = False) -> Dict:
    """Llama a /stock/recalculate y devuelve el bloque `data`"""

    response = requests.get(
        f"{base_url}/api/v1/stock/recalculate",
        params={"item_type": "all", "include_inactive": include_inactive, "include_zero": True},
        timeout=60
    )
    response.raise_for_status()
    return response.json()["data"]

def find_issues(stock: Dict) -> List[str]:
    """Problemas de integridad de un item: totales descuadrados o ubicaciones huérfanas"""

    issues = []
    breakdown_total = sum(location["quantity"] for location in stock["locations"])
    if breakdown_total != stock["total_stock"]:
        issues.append(f"total {stock['total_stock']} != suma del desglose {breakdown_total}")

    for location in stock["locations"]:
        if location["location_path"] == "Unknown":
            issues.append(f"{location['quantity']} uds. en {location['location_type']} inexistente")
        if location["quantity"] < 0:
            issues.append(f"cantidad negativa en {location['location_path']}")

    return issues

def build_report(data: Dict) -> Dict:
    items = [*data["repuestos"], *data["componentes"]]
    report = {
        "items": [],
        "low_stock": [stock for stock in data["repuestos"] if stock["is_low_stock"]],
        "summary": data["summary"]
    }

    for stock in items:
        report["items"].append({
            "item_type": stock["item_type"],
            "item_code": stock["item_code"],
            "item_name": stock["item_name"],
            "total_stock": stock["total_stock"],
            "locations": len(stock["locations"]),
            "issues": find_issues(stock)
        })

    report["items_with_issues"] = sum(1 for item in report["items"] if item["issues"])
    return report

def print_report(report: Dict):
    """Print report in a readable format"""

    print("📦 Stock Integrity Report")
    print("=" * 50)

    for item in report["items"]:
        status_emoji = "❌" if item["issues"] else "✅"
        print(f"{status_emoji} [{item['item_type']}] {item['item_code']} - {item['item_name']}")
        print(f"   Total: {item['total_stock']} en {item['locations']} ubicación(es)")
        for issue in item["issues"]:
            print(f"   ⚠️ {issue}")

    if report["low_stock"]:
        print()
        print("📉 Stock bajo")
        print("-" * 20)
        for stock in report["low_stock"]:
            print(f"   {stock['item_code']}: {stock['total_stock']} (mínimo {stock['low_stock_threshold']})")

    print()
    print("📊 Summary")
    print("-" * 20)
    print(f"Repuestos: {report['summary']['total_repuestos']}")
    print(f"Componentes: {report['summary']['total_componentes']}")
    print(f"Stock bajo: {report['summary']['low_stock_repuestos']}")
    print(f"Items con problemas: {report['items_with_issues']}")

if __name__ == "__main__":
    import sys

    # Allow custom base URL as command line argument
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
    include_inactive = "--include-inactive" in sys.argv[2:]

    print(f"🧪 Recalculando stock en: {base_url}\n")

    try:
        data = fetch_recalculation(base_url, include_inactive)
    except requests.exceptions.RequestException as e:
        print(f"❌ Request failed: {str(e)}")
        sys.exit(2)

    report = build_report(data)
    print_report(report)

    # Exit with error code if integrity issues were found
    if report["items_with_issues"] > 0:
        sys.exit(1)
