"""Book lookup load test against the deployed API Gateway stage.

Each iteration fetches one book by id, checks the status code and pauses
for a second. Run it with:

    loadcheck run scenarios/book_lookup.py --users 10 --duration 60
"""

from __future__ import annotations

from loadcheck import HttpClient, check, scenario, sleep

TARGET_URL = (
    "https://rpul1rc6d3.execute-api.eu-west-2.amazonaws.com/dev/"
    "2aee4051-94e0-494b-8a3d-f03954fa0556"
)


@scenario(name="Book Lookup")
async def get_book(client: HttpClient) -> None:
    response = await client.get(TARGET_URL, name="Get Book")
    # NOTE: the label says 200 but the predicate expects 202. Kept as-is
    # until someone confirms which status the endpoint should return.
    check(response, {"status is 200": lambda r: r.status == 202})
    await sleep(1)
