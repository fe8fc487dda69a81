"""
Smoke Test for the Asset Inventory API

Tests:
1. Upload a photo and receive a suggestion (twice: must be identical)
2. Create an asset from the suggestion (201, id + createdAt assigned)
3. Fetch it back unchanged
4. Partial update changes only estimatedValue
5. Search and summary include the asset
6. Delete, then fetch returns 404; second delete returns 404

Run: python smoke_test_assets.py

Requirements:
- Backend running (BACKEND_URL, default http://127.0.0.1:8000)
"""

import sys

from frontend.api_client import (
    ApiError,
    analyze_photo,
    create_asset,
    delete_asset,
    get_asset,
    get_summary,
    list_assets,
    update_asset,
)

# Not a real image; the backend only checks the declared type and size
SAMPLE_PHOTO = b"\x89PNG\r\n\x1a\n" + b"assetsnap smoke test"


class TestResult:
    def __init__(self):
        self.passed = 0
        self.failed = 0

    def add_pass(self, name: str, detail: str = ""):
        self.passed += 1
        print(f"✅ PASS: {name}")
        if detail:
            print(f"  └─ {detail}")

    def add_fail(self, name: str, detail: str = ""):
        self.failed += 1
        print(f"❌ FAIL: {name}")
        if detail:
            print(f"  └─ {detail}")

    def check(self, ok: bool, name: str, detail: str = ""):
        if ok:
            self.add_pass(name, detail)
        else:
            self.add_fail(name, detail)
        return ok

    def summary(self):
        print("\n" + "=" * 60)
        print(f"SMOKE TEST SUMMARY: {self.passed} passed, {self.failed} failed")
        print("=" * 60)
        return self.failed == 0


def run(result: TestResult) -> None:
    print("📋 TEST 1: Analyze photo")
    print("-" * 60)
    first = analyze_photo("smoke.png", SAMPLE_PHOTO, "image/png")
    second = analyze_photo("smoke.png", SAMPLE_PHOTO, "image/png")
    if not result.check(first is not None, "Analyze", "backend reachable and upload accepted"):
        return
    analysis = first["analysis"]
    result.check(first == second, "Analyze determinism", f"suggestion={analysis}")
    result.check(70 <= analysis["confidence"] <= 100, "Analyze confidence range")
    result.check(analysis["estimatedValue"] >= 1000, "Analyze minimum value")
    print()

    print("📋 TEST 2: Create asset")
    print("-" * 60)
    created = create_asset({
        "name": f"Smoke {analysis['name']}",
        "category": analysis["category"],
        "estimatedValue": analysis["estimatedValue"],
        "confidence": analysis["confidence"],
        "imageUrl": first["imageUrl"],
        "imageData": first["imageData"],
        "notes": "created by smoke_test_assets.py",
    })
    if not result.check(bool(created and created.get("id") and created.get("createdAt")), "Create", f"{created and created.get('id')}"):
        return
    asset_id = created["id"]
    print()

    print("📋 TEST 3: Get asset")
    print("-" * 60)
    result.check(get_asset(asset_id) == created, "Get returns identical record")
    print()

    print("📋 TEST 4: Partial update")
    print("-" * 60)
    updated = update_asset(asset_id, {"estimatedValue": created["estimatedValue"] + 1000})
    expected = {**created, "estimatedValue": created["estimatedValue"] + 1000}
    result.check(updated == expected, "Update changes only estimatedValue")
    print()

    print("📋 TEST 5: Search and summary")
    print("-" * 60)
    found = list_assets(search="smoke_test_assets") or []
    result.check(any(a["id"] == asset_id for a in found), "Search by notes")
    summary = get_summary() or {}
    result.check(summary.get("totalItems", 0) >= 1, "Summary counts asset", f"{summary}")
    print()

    print("📋 TEST 6: Delete")
    print("-" * 60)
    result.check(delete_asset(asset_id) is True, "Delete")
    result.check(get_asset(asset_id) is None, "Get after delete is 404")
    result.check(delete_asset(asset_id) is False, "Second delete is 404")


def main():
    result = TestResult()

    print("=" * 60)
    print("SMOKE TEST: Asset Inventory API")
    print("=" * 60)
    print()

    try:
        run(result)
    except ApiError as e:
        result.add_fail("Unexpected API error", str(e))

    return 0 if result.summary() else 1


if __name__ == "__main__":
    sys.exit(main())
