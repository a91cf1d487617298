"""Scenario walkthrough - runs the follow and post flows against a scratch ledger."""

import asyncio
import hashlib
import tempfile
from datetime import datetime
from pathlib import Path

from nacl.signing import SigningKey

from socialchain import Runtime, SocialConfig
from socialchain.config import ContentLayout, PostLayout, StoreBackend
from socialchain.core.host import FixedClock
from socialchain.models.address import Address

# Identities derived from fixed labels so every run touches the same accounts
LABELS = ["owner", "alice", "bob"]


def identity(label: str) -> Address:
    seed = hashlib.sha256(label.encode("utf-8")).digest()
    return Address(bytes(SigningKey(seed).verify_key))


def report(step: str, result) -> dict:
    mark = "✓" if result.success else "❌"
    detail = "" if result.success else f" ({result.error_type}: {result.error_message})"
    print(f"  {mark} {step}{detail}")
    return {"step": step, "success": result.success, "duration_ms": result.duration_ms}


async def follow_scenario(db_path: Path) -> list[dict]:
    """Initialize a profile, follow two identities, unfollow one."""
    print(f"\n{'='*60}")
    print("Follow scenario")
    print(f"{'='*60}")

    owner, alice, bob = (identity(label) for label in LABELS)
    config = SocialConfig(
        store_backend=StoreBackend.SQLITE,
        sqlite_path=str(db_path),
        log_level="WARNING",
    )

    steps = []
    async with Runtime(config) as runtime:
        await runtime.fund(owner)
        steps.append(report("initialize profile", await runtime.initialize_user(owner, "profile")))
        steps.append(report("follow alice", await runtime.follow(owner, alice)))
        steps.append(report("follow bob", await runtime.follow(owner, bob)))
        steps.append(report("unfollow alice", await runtime.unfollow(owner, alice)))

        result = await runtime.query_followers(owner)
        steps.append(report("query followers", result))
        if result.success:
            print(f"\n--- Follows ({result.profile.follow_count}) ---")
            for followed in result.profile.follows:
                print(f"  {followed}")

    return steps


async def post_scenario(db_path: Path, layout: PostLayout) -> list[dict]:
    """Post a valid and an invalid 20-byte message, then read the posts back."""
    print(f"\n{'='*60}")
    print(f"Post scenario ({layout.value})")
    print(f"{'='*60}")

    owner = identity(LABELS[0])
    config = SocialConfig(
        store_backend=StoreBackend.SQLITE,
        sqlite_path=str(db_path),
        post_layout=layout,
        content_layout=ContentLayout.FIXED,
        content_size=20,
        log_level="WARNING",
    )

    steps = []
    clock = FixedClock(int(datetime.now().timestamp()))
    async with Runtime(config, clock=clock) as runtime:
        await runtime.fund(owner)
        steps.append(report("initialize post log", await runtime.initialize_user(owner, "post")))
        steps.append(report("post 20 bytes", await runtime.post(owner, "hello world 1234567.")))

        rejected = await runtime.post(owner, "hello world 1234567")
        print(f"  {'✓' if not rejected.success else '❌'} 19-byte post rejected")
        steps.append({"step": "reject 19 bytes", "success": not rejected.success, "duration_ms": rejected.duration_ms})

        index = 1 if layout == PostLayout.PER_POST else None
        result = await runtime.query_posts(owner, index)
        steps.append(report("query posts", result))
        if result.success:
            posts = result.post_log.posts if result.post_log is not None else [result.post]
            print(f"\n--- Posts ({len(posts)}) ---")
            for p in posts:
                print(f"  [{p.timestamp}] {p.content}")

    return steps


async def main():
    """Run every scenario against fresh SQLite ledgers."""
    print("=" * 60)
    print("socialchain scenarios")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        tmp_dir = Path(tmp)
        results = {
            "follow": await follow_scenario(tmp_dir / "follow.db"),
            "embedded": await post_scenario(tmp_dir / "embedded.db", PostLayout.EMBEDDED),
            "per_post": await post_scenario(tmp_dir / "per_post.db", PostLayout.PER_POST),
        }

    # Summary
    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)

    print("\n| Scenario | Steps | Passed | Duration |")
    print("|----------|-------|--------|----------|")
    for name, steps in results.items():
        passed = sum(1 for s in steps if s["success"])
        duration = f"{sum(s['duration_ms'] for s in steps):.0f}ms"
        print(f"| {name:<8} | {len(steps):<5} | {passed:<6} | {duration:<8} |")


if __name__ == "__main__":
    asyncio.run(main())
