"""Load test: rank synthetic Akwa Ibom profiles through the matching API.

Checks score ranges, ordering and latency of the ranked-matches endpoint.
Usage: python -m scripts.load_test [--count 500] [--requests 50] [--base-url http://localhost:8000]
"""
import argparse
import asyncio
import random
import statistics
import sys
import time
import uuid
from datetime import date, timedelta
from typing import Any

import httpx

from akwa_connect.data.regions import LGA_SENATORIAL_DISTRICTS, OUTSIDE_NIGERIA, OTHER_NIGERIA


DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_COUNT = 500
DEFAULT_REQUESTS = 50

HOBBIES = [
    "music", "art", "travel", "football", "cooking", "reading",
    "dancing", "church", "movies", "fashion", "photography", "farming",
]

GOALS = ["marriage", "serious relationship", "casual dating", "friendship", "single_parent"]

EDUCATION = ["secondary", "diploma", "bachelors", "masters", "phd", None]

PROFESSIONS = ["student", "lecturer", "banker", "nurse", "engineer", "trader", "civil servant", None]

BIOS = [
    "I love music and travelling around the country with friends.",
    "Quiet person who enjoys reading, cooking and long evening walks.",
    "Football fan, proud Ibibio, looking for someone serious about family.",
    "Lecturer by day, amateur photographer by weekend. Love good food.",
    "Single mother of two, church every Sunday, enjoy dancing and movies.",
]

CONNECTION_REASONS = [
    "I work in Uyo and love the Ibibio culture",
    "My mother is from Eket, I want to reconnect with my roots",
    "Studied at the university here and made many friends",
    "Interested in Annang heritage and tradition",
]


def random_profile() -> dict[str, Any]:
    """Generate one profile in the camelCase shape the profile store returns."""
    lgas = list(LGA_SENATORIAL_DISTRICTS)
    age = random.randint(21, 48)
    dob = date.today() - timedelta(days=int(age * 365.25) + random.randint(0, 300))
    min_pref = random.randint(20, 30)
    profile: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "dob": dob.isoformat(),
        "gender": random.choice(["male", "female"]),
        "relationshipGoal": random.choice(GOALS),
        "education": random.choice(EDUCATION),
        "profession": random.choice(PROFESSIONS),
        "hobbies": random.sample(HOBBIES, random.randint(0, 5)),
        "bio": random.choice(BIOS + [None]),
        "minAgePreference": min_pref,
        "maxAgePreference": min_pref + random.randint(8, 20),
    }
    if random.random() < 0.75:
        profile["connectionType"] = "native"
        profile["lga"] = random.choice(lgas)
        profile["hometown"] = profile["lga"]
    else:
        profile["connectionType"] = "non-native"
        profile["currentLga"] = random.choice(lgas + [OUTSIDE_NIGERIA, OTHER_NIGERIA])
        profile["city"] = random.choice(["uyo", "eket", "lagos", "abuja"])
        profile["connectionReason"] = random.choice(CONNECTION_REASONS)
    return profile


def check_ranking(matches: list[dict[str, Any]], user_id: str) -> list[str]:
    """Return invariant violations found in one ranked response."""
    problems = []
    scores = [m["score"] for m in matches]
    if scores != sorted(scores, reverse=True):
        problems.append("matches not sorted by score")
    for m in matches:
        if not 0 <= m["score"] <= 100:
            problems.append(f"score out of range: {m['score']}")
        if m["user"]["id"] == user_id:
            problems.append("acting user returned as a match")
        if not m["reasons"]:
            problems.append("empty reasons list")
    return problems


async def run_load_test(base_url: str, count: int, n_requests: int) -> dict[str, Any]:
    """Post the synthetic pool for random acting users and collect stats."""
    print(f"\n{'='*60}")
    print(f"Akwa-Connect Load Test — pool of {count} profiles, {n_requests} requests")
    print(f"Target: {base_url}")
    print(f"{'='*60}\n")

    pool = [random_profile() for _ in range(count)]
    results: dict[str, Any] = {
        "requests": n_requests,
        "succeeded": 0,
        "match_counts": [],
        "scores": [],
        "errors": [],
        "timings": [],
    }

    async with httpx.AsyncClient(timeout=60.0) as client:
        for i in range(n_requests):
            acting = random.choice(pool)
            manual = i % 2 == 1
            payload = {
                "userId": acting["id"],
                "users": pool,
                "manual": manual,
                "filters": {"minAge": 25, "hobbies": random.sample(HOBBIES, 2)} if manual else {},
            }
            t0 = time.monotonic()
            try:
                resp = await client.post(f"{base_url}/api/v1/match/ranked", json=payload)
            except httpx.HTTPError as e:
                results["errors"].append(f"Request {i}: {e}")
                continue
            results["timings"].append(time.monotonic() - t0)

            if resp.status_code != 200:
                results["errors"].append(f"Request {i}: status {resp.status_code}")
                continue

            body = resp.json()
            problems = check_ranking(body["matches"], acting["id"])
            if problems:
                results["errors"].extend(f"Request {i}: {p}" for p in problems)
                continue

            results["succeeded"] += 1
            results["match_counts"].append(len(body["matches"]))
            results["scores"].extend(m["score"] for m in body["matches"])
            if (i + 1) % 10 == 0:
                print(f"  Completed {i + 1}/{n_requests} requests")

    print(f"{'='*60}")
    print("LOAD TEST RESULTS")
    print(f"{'='*60}")
    print(f"Successful requests: {results['succeeded']}/{n_requests}")

    if results["match_counts"]:
        print(f"Matches per request: mean {statistics.mean(results['match_counts']):.1f}")
    if results["scores"]:
        print(f"Score distribution:  mean {statistics.mean(results['scores']):.1f}, "
              f"median {statistics.median(results['scores']):.1f}")

    timings = results["timings"]
    if timings:
        print("\nranking latency:")
        print(f"  mean:   {statistics.mean(timings):.3f}s")
        print(f"  median: {statistics.median(timings):.3f}s")
        print(f"  p95:    {sorted(timings)[int(len(timings)*0.95)]:.3f}s")
        print(f"  max:    {max(timings):.3f}s")

    if results["errors"]:
        print(f"\nErrors ({len(results['errors'])}):")
        for e in results["errors"][:10]:
            print(f"  - {e}")

    print(f"\n{'='*60}\n")
    return results


def main():
    parser = argparse.ArgumentParser(description="Akwa-Connect Load Test")
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="Size of the synthetic pool")
    parser.add_argument("--requests", type=int, default=DEFAULT_REQUESTS, help="Number of ranking requests")
    parser.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")
    args = parser.parse_args()

    results = asyncio.run(run_load_test(args.base_url, args.count, args.requests))

    success_rate = results["succeeded"] / max(results["requests"], 1)
    if success_rate < 0.95:
        print(f"FAIL: Only {success_rate:.0%} success rate (target: 95%)")
        sys.exit(1)
    print(f"PASS: {success_rate:.0%} success rate")


if __name__ == "__main__":
    main()
