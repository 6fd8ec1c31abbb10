"""
Latency check for ACORD form generation.

Posts complete submissions to a running server's /v1/acord/generate
endpoint, records client and server timings together with the number of
forms and populated fields in each response, and checks p50 < 250ms.
"""

import httpx
import time
import statistics
from collections import Counter
from typing import Dict, List

API_URL = "http://localhost:8000"
TARGET_P50_MS = 250.0

BUSINESS = {
    "name": "TechStart Solutions LLC",
    "federalId": "12-3456789",
    "businessType": "llc",
    "yearsInBusiness": 3,
    "description": "Software development and IT consulting services",
    "website": "https://techstartsolutions.com"
}

CONTACT = {
    "contactName": "Sarah Johnson",
    "email": "sarah@techstartsolutions.com",
    "phone": "(555) 123-4567",
    "address": "123 Innovation Drive",
    "city": "San Francisco",
    "state": "CA",
    "zipCode": "94105"
}

GL_ANSWERS = {
    "general-liability-limit": "$1,000,000",
    "business-operations": "Custom software development for small businesses",
    "business-classification": "Technology",
    "sic-code": "7372",
    "naics-code": "541511",
    "employee-count": 25,
    "annual-revenue": "$1,000,000-$5,000,000",
    "business-location-count": 1,
    "products-completed-operations": "No"
}

WC_ANSWERS = {
    "wc-employee-count": 20,
    "annual-payroll": "$500,000+",
    "wc-business-classification": "Technology",
    "years-in-business": 3,
    "business-county": "San Francisco County"
}

# Selection label -> (coverage types, answers); cycled through in order
SELECTIONS = {
    "GL": (["general-liability"], GL_ANSWERS),
    "GL+WC": (["general-liability", "workers-compensation"], {**GL_ANSWERS, **WC_ANSWERS}),
}


def build_payload(coverage_types: List[str], answers: Dict) -> Dict:
    return {
        "clientType": "business",
        "business": BUSINESS,
        "contact": CONTACT,
        "coverageTypes": coverage_types,
        "coverageAnswers": answers,
    }


def generate_once(client: httpx.Client, label: str, request_id: str) -> Dict:
    """
    Generate forms for one selection.

    Returns:
        Sample with client/server timings and, on success, the form types
        and total populated field count of the response
    """
    coverage_types, answers = SELECTIONS[label]
    start = time.perf_counter()
    response = client.post(
        f"{API_URL}/v1/acord/generate",
        json=build_payload(coverage_types, answers),
        headers={"X-Request-ID": request_id},
        timeout=10.0
    )
    sample = {
        "label": label,
        "status": response.status_code,
        "client_ms": (time.perf_counter() - start) * 1000,
        "server_ms": float(response.headers.get("X-Response-Time-Ms", "nan")),
    }
    if response.status_code == 200:
        forms = response.json()["forms"]
        sample["form_types"] = tuple(f["formType"] for f in forms)
        sample["field_count"] = sum(len(f["fields"]) for f in forms)
    else:
        sample["error"] = response.text[:200]
    return sample


def wait_for_server(retries: int = 10) -> bool:
    for _ in range(retries):
        try:
            if httpx.get(f"{API_URL}/health", timeout=2.0).status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(1)
    return False


def percentile(values: List[float], pct: int) -> float:
    # statistics.quantiles needs at least two points
    if len(values) < 2:
        return values[0]
    return statistics.quantiles(values, n=100, method="inclusive")[pct - 1]


def report(samples: List[Dict]) -> bool:
    ok = [s for s in samples if s["status"] == 200]
    failed = [s for s in samples if s["status"] != 200]

    print(f"Requests: {len(samples)} | ok={len(ok)} | failed={len(failed)}")
    for status, count in Counter(s["status"] for s in failed).items():
        print(f"  status {status}: {count} (first error: "
              f"{next(s['error'] for s in failed if s['status'] == status)})")
    if not ok:
        return False

    print()
    print("Forms per selection:")
    for label in SELECTIONS:
        outputs = Counter((s["form_types"], s["field_count"]) for s in ok if s["label"] == label)
        for (form_types, field_count), count in outputs.items():
            print(f"  {label}: {', '.join(form_types)} | fields={field_count} | responses={count}")
        if len(outputs) > 1:
            print(f"  ! {label} produced {len(outputs)} different outputs")

    client_ms = [s["client_ms"] for s in ok]
    server_ms = [s["server_ms"] for s in ok]
    print()
    print(f"{'':8}{'client':>10}{'server':>10}")
    for pct in (50, 95, 99):
        print(f"p{pct:<7}{percentile(client_ms, pct):>10.2f}{percentile(server_ms, pct):>10.2f}")

    p50 = percentile(client_ms, 50)
    passed = p50 < TARGET_P50_MS
    print()
    print(f"{'PASS' if passed else 'FAIL'}: p50 {p50:.2f}ms vs {TARGET_P50_MS}ms target")
    return passed


def main(num_requests: int = 100):
    print("ACORD Intake API - form generation latency")
    if not wait_for_server():
        print("Server not responding at", API_URL)
        return

    labels = list(SELECTIONS)
    with httpx.Client() as client:
        samples = [
            generate_once(client, labels[i % len(labels)], f"perf-{i}")
            for i in range(num_requests)
        ]
    report(samples)


if __name__ == "__main__":
    main()
