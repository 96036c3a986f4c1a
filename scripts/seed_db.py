from __future__ import annotations

from _common import settings_container

from src.school_billing.school_billing.database.bootstrap import seed_collections


def main() -> None:
    settings, container = settings_container()
    seeded = seed_collections(container.store)
    db = settings.DB_CONFIG
    print(f"OK: Seeded {seeded or 'nothing (collections not empty)'} -> {db.get('host')}/{db.get('database')}")


if __name__ == "__main__":
    main()
