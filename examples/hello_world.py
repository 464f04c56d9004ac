"""
policy_store — Hello World

Every slot has a permission. Paths route through nested stores,
checking the permission at every hop. Callables resolve on read.
"""

from datetime import UTC, datetime

from policy_store import AccessDeniedError, Store, restrict

# ─── A store type with per-field permissions ───


@restrict(api_key="none", name="r")
class ServiceConfig(Store):
    pass


def report(error: AccessDeniedError) -> None:
    print(f"  [DENIED] key={error.key}  operation={error.operation}")


def main():
    # ──────────────────────────────────────
    #  1. Create the store (read-only name seeded at construction)
    # ──────────────────────────────────────
    config = ServiceConfig(initial={"name": "search-api", "api_key": "s3cret"})

    # ──────────────────────────────────────
    #  2. Nested data becomes nested stores
    # ──────────────────────────────────────
    config.write(
        "database",
        {"host": "localhost", "port": 5432, "pool": {"min": 1, "max": 10}},
    )
    config.write("features:search:enabled", True)  # intermediate stores auto-created
    config.write("started_at", lambda: datetime.now(UTC).isoformat())

    print("=== Reads ===\n")
    print(f"  name:              {config.read('name')}")
    print(f"  database:pool:max: {config.read('database:pool:max')}")
    print(f"  features:search:   {config.read('features:search').entries()}")
    print(f"  started_at:        {config.read('started_at')}")
    print(f"  missing:           {config.read('database:nope')}")

    # ──────────────────────────────────────
    #  3. Denials
    # ──────────────────────────────────────
    print("\n=== Denials ===\n")

    try:
        config.read("api_key")
    except AccessDeniedError as e:
        report(e)

    try:
        config.write("name", "other")
    except AccessDeniedError as e:
        report(e)

    # ──────────────────────────────────────
    #  4. Lock down a nested key at runtime
    # ──────────────────────────────────────
    print("\n=== Runtime restriction ===\n")

    config.write("database:password", "pw")
    config.restrict("database:password", "w")
    try:
        config.read("database:password")
    except AccessDeniedError as e:
        report(e)

    # ──────────────────────────────────────
    #  5. Enumerate what is visible
    # ──────────────────────────────────────
    print("\nVisible entries:", config.entries())


if __name__ == "__main__":
    main()
