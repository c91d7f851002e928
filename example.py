"""Example usage of the entitydiff comparison engine."""

import json
from entitydiff import (
    ArrayMatching,
    ComparisonMode,
    CompareOptions,
    ComparisonSession,
    compare_documents,
)

# Two exports of the same user list from different systems
old_users = {
    "users": [
        {
            "id": 1,
            "name": "Alice Smith",
            "email": "ALICE@example.com ",
            "balance": 100.00,
            "tags": ["admin", "staff"],
            "updated_at": "2025-01-01T10:00:00Z"
        },
        {
            "id": 2,
            "name": "Bob Jones",
            "email": "bob@example.com",
            "balance": 52.10,
            "tags": ["staff"],
            "updated_at": "2025-01-01T10:00:00Z"
        },
        {
            "id": 3,
            "name": "Carol White",
            "email": "carol@example.com",
            "balance": 0,
            "tags": [],
            "updated_at": "2025-01-01T10:00:00Z"
        }
    ]
}

new_users = {
    "users": [
        {
            "id": 2,
            "name": "Bob Jones",
            "email": "bob@example.com",
            "balance": 52.104,
            "tags": ["staff"],
            "updated_at": "2025-02-14T08:30:00Z"
        },
        {
            "id": 1,
            "name": "Alice Smith",
            "email": "alice@example.com",
            "balance": 100.00,
            "tags": ["staff", "admin"],
            "updated_at": "2025-02-14T08:30:00Z"
        },
        {
            "id": 4,
            "name": "Dan Brown",
            "email": "dan@example.com",
            "balance": 12.5,
            "tags": ["guest"],
            "updated_at": "2025-02-14T08:30:00Z"
        }
    ]
}


def main():
    print("=" * 60)
    print("entitydiff Comparison Engine - Example")
    print("=" * 60)

    options = CompareOptions(
        mode=ComparisonMode.IGNORE_ORDER,
        array_matching=ArrayMatching.INDEX,
        normalize_strings=True,
        ignore_timestamps=True,
        numeric_tolerance=0.01,
    )

    result = compare_documents(old_users, new_users, "users[].id", options)

    print(f"\nMatch: {result.is_match}")
    print(f"\nSummary:")
    print(f"  Total Differences: {result.summary.total_differences}")
    print(f"  Added: {result.summary.added}")
    print(f"  Deleted: {result.summary.deleted}")
    print(f"  Modified: {result.summary.modified}")
    print(f"  Identical Entities: {result.summary.equal}")

    if result.differences:
        print(f"\nDifferences:")
        for diff in result.differences:
            print(f"  - [{diff.type.value}] {diff.path}")

    print("\n" + "-" * 60)
    print("Full JSON Report:")
    print(json.dumps(result.to_dict(include_matched=False), indent=2))

    # Same documents with strict defaults
    print("\n" + "=" * 60)
    print("Example with Default Options")
    print("=" * 60)

    session = ComparisonSession()
    session.compare(old_users, new_users, "users[].id")
    session.filter_by_type("modified")

    print(f"\nModified fields: {len(session.visible)}")
    for diff in session.visible:
        print(f"  - {diff.path}: {diff.old_value!r} -> {diff.new_value!r}")

    print(f"\nStatistics:")
    for name, value in session.statistics().items():
        print(f"  {name}: {value}")


if __name__ == "__main__":
    main()
