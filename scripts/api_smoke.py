#!/usr/bin/env python3
"""Client-side walkthrough of a running crawlsearch API.

Checks the app status, starts a crawl, polls the task until it completes and
then runs a document search.
"""

from __future__ import annotations

import argparse
import json
import sys
import time

import httpx


def _dump(data: dict) -> None:
    print(json.dumps(data, indent=4))


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", default="http://localhost:8000")
    parser.add_argument("--fqdn", default="developer.redis.com")
    parser.add_argument("--term", default="Node.js")
    parser.add_argument("--poll-sec", type=float, default=10.0)
    args = parser.parse_args()

    with httpx.Client(base_url=args.url, timeout=30.0) as client:
        print("*** app status ***")
        _dump(client.get("/").json())

        print("\n*** start a crawl task ***")
        res = client.post("/crawl", json={"fqdn": args.fqdn})
        if res.status_code != 201:
            print(f"crawl launch failed: {res.text}", file=sys.stderr)
            return 1
        task_id = res.json()["taskID"]
        _dump(res.json())

        print("\n*** check status on the crawl task ***")
        status = None
        while status != "complete":
            time.sleep(args.poll_sec)
            try:
                res = client.get(f"/status/tasks/{task_id}")
                data = res.json()
                status = data.get("status")
                _dump(data)
            except httpx.HTTPError as exc:
                print(exc)

        print("\n*** document search ***")
        _dump(client.put("/search", json={"term": args.term}).json())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
