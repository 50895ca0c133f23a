#!/usr/bin/env python3
"""
Validation script for URL Shortener service.
Exercises a live deployment: health check, create, redirect and error paths.
"""

import argparse
import sys
import time
from datetime import datetime
from typing import List, Optional, Tuple

import requests


class ServiceValidator:
    """Validates URL shortener service functionality."""

    def __init__(self, base_url: str = "http://localhost:1378", timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.test_results: List[Tuple[str, bool, float]] = []

    def print_header(self, text: str):
        print(f"\n{'='*60}")
        print(f"  {text}")
        print(f"{'='*60}\n")

    def print_test(self, name: str, passed: bool, elapsed_ms: float, details: str = ""):
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed, elapsed_ms))
        print(f"[{status}] {name} ({elapsed_ms:.1f}ms)")
        if details:
            print(f"       {details}")

    def _timed(self, method: str, path: str, **kwargs):
        start = time.perf_counter()
        response = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        return response, (time.perf_counter() - start) * 1000

    def test_health_check(self) -> bool:
        """GET /healthz answers 204 with an empty body."""
        try:
            response, elapsed = self._timed("GET", "/healthz")
            passed = response.status_code == 204 and not response.content
            self.print_test("Health Check", passed, elapsed, f"Status: {response.status_code}")
            return passed
        except requests.RequestException as e:
            self.print_test("Health Check", False, 0.0, f"Error: {e}")
            return False

    def test_create_short_url(self, target: str) -> Optional[str]:
        """POST /api/urls answers 200 with the short code as a JSON string."""
        try:
            response, elapsed = self._timed(
                "POST",
                "/api/urls",
                json={"url": target},
                headers={"Content-Type": "application/json"},
            )
            if response.status_code == 200:
                short_code = response.json()
                if isinstance(short_code, str) and short_code:
                    self.print_test("Create Short URL", True, elapsed, f"Code: {short_code}")
                    return short_code

            self.print_test("Create Short URL", False, elapsed, f"Status: {response.status_code}")
            return None
        except (requests.RequestException, ValueError) as e:
            self.print_test("Create Short URL", False, 0.0, f"Error: {e}")
            return None

    def test_redirect(self, short_code: str, target: str) -> bool:
        """GET /api/{code} answers 307 with Location set to the target."""
        try:
            response, elapsed = self._timed("GET", f"/api/{short_code}", allow_redirects=False)
            location = response.headers.get("Location", "")
            passed = response.status_code == 307 and location == target
            self.print_test(
                "URL Redirect",
                passed,
                elapsed,
                f"Status: {response.status_code}, Location: {location or 'missing'}",
            )
            return passed
        except requests.RequestException as e:
            self.print_test("URL Redirect", False, 0.0, f"Error: {e}")
            return False

    def test_invalid_url(self) -> bool:
        """POST /api/urls with a malformed URL answers 400."""
        try:
            response, elapsed = self._timed("POST", "/api/urls", json={"url": "not-a-valid-url"})
            passed = response.status_code == 400
            self.print_test("Invalid URL Rejection", passed, elapsed, f"Status: {response.status_code} (expected 400)")
            return passed
        except requests.RequestException as e:
            self.print_test("Invalid URL Rejection", False, 0.0, f"Error: {e}")
            return False

    def test_nonexistent_code(self) -> bool:
        """GET /api/{unknown} answers with a client error, not a redirect."""
        try:
            response, elapsed = self._timed("GET", "/api/does-not-exist", allow_redirects=False)
            passed = 400 <= response.status_code < 500
            self.print_test("Non-existent Code", passed, elapsed, f"Status: {response.status_code} (expected 404)")
            return passed
        except requests.RequestException as e:
            self.print_test("Non-existent Code", False, 0.0, f"Error: {e}")
            return False

    def run_all_tests(self, iterations: int = 1) -> bool:
        """Run all validation tests."""
        self.print_header("URL Shortener Service Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_health_check():
            print("\nHealth check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        print()

        for i in range(iterations):
            target = f"https://example.com/page/{int(time.time())}/{i}"
            short_code = self.test_create_short_url(target)
            if short_code:
                self.test_redirect(short_code, target)

        print()

        self.test_invalid_url()
        self.test_nonexistent_code()

        self.print_summary()

        return all(passed for _, passed, _ in self.test_results)

    def print_summary(self):
        total = len(self.test_results)
        passed = sum(1 for _, p, _ in self.test_results if p)
        failed = total - passed
        latencies = sorted(ms for _, _, ms in self.test_results if ms > 0)

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"Passed:       {passed}")
        print(f"Failed:       {failed}")
        print(f"Success Rate: {(passed/total*100):.1f}%")
        if latencies:
            p95 = latencies[min(len(latencies) - 1, int(len(latencies) * 0.95))]
            print(f"Latency p95:  {p95:.1f}ms")

        if failed > 0:
            print("\nFailed tests:")
            for name, ok, _ in self.test_results:
                if not ok:
                    print(f"   - {name}")

        print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate URL Shortener service functionality"
    )
    parser.add_argument(
        "--url",
        default="http://localhost:1378",
        help="Base URL of the service (default: http://localhost:1378)"
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=1,
        help="Number of create/redirect rounds (default: 1)"
    )

    args = parser.parse_args()

    validator = ServiceValidator(args.url)

    try:
        success = validator.run_all_tests(iterations=args.iterations)
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nValidation interrupted by user")
        sys.exit(2)


if __name__ == "__main__":
    main()
