"""Book lookup load test against a locally running API.

Same iteration as ``book_lookup.py``, pointed at a local stage. Run it with:

    loadcheck run scenarios/book_lookup_local.py --users 1 --iterations 10
"""

from __future__ import annotations

from loadcheck import HttpClient, check, scenario, sleep

TARGET_URL = "http://localhost:9000/dev/2aee4051-94e0-494b-8a3d-f03954fa0556"


@scenario(name="Book Lookup (local)")
async def get_book(client: HttpClient) -> None:
    response = await client.get(TARGET_URL, name="Get Book")
    # NOTE: label/predicate mismatch (200 vs 202) mirrors book_lookup.py.
    check(response, {"status is 200": lambda r: r.status == 202})
    await sleep(1)
