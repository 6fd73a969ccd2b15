#!/usr/bin/env python3
"""Basic digestcore example.

Demonstrates incremental hashing, truncated output, HMAC, and the
handle-based binding API.
"""

import sys
from pathlib import Path

# Add the parent directory to the path so we can import digestcore
sys.path.insert(0, str(Path(__file__).parent.parent))

from digestcore import DigestContext, HandleRegistry, InvalidStateError, KeyedContext


def main() -> None:
    print("digestcore basic example")
    print("=" * 40)

    print("\n1. Incremental SHA-256...")
    with DigestContext.create("SHA256") as ctx:
        ctx.update(b"ab")
        ctx.update(b"c")
        print(f"   sha256('abc') = {ctx.finalize().hex()}")

    print("\n2. Truncated digest...")
    with DigestContext.create("SHA256") as ctx:
        ctx.update(b"abc")
        print(f"   first 8 bytes = {ctx.finalize(truncate_to=8).hex()}")

    print("\n3. HMAC-SHA256...")
    with KeyedContext.create("HMAC-SHA256", b"key") as ctx:
        ctx.update(b"The quick brown fox jumps over the lazy dog")
        print(f"   tag = {ctx.finalize().hex()}")

    print("\n4. Finalize is one-shot...")
    ctx = DigestContext.create("MD5")
    ctx.finalize()
    try:
        ctx.update(b"more")
    except InvalidStateError as e:
        print(f"   refused: {e}")
    ctx.destroy()

    print("\n5. Handle registry...")
    with HandleRegistry() as registry:
        handle = registry.new_hmac("HMAC-SHA256", "key")
        registry.update(handle, "The quick brown fox jumps over the lazy dog")
        print(f"   handle {handle} tag = {registry.digest(handle).hex()}")
        registry.destroy(handle)


if __name__ == "__main__":
    main()
