"""Delete all enrollments, installments and payments (courses/cycles stay)."""

from __future__ import annotations

from _common import settings_container


def main() -> None:
    _, container = settings_container()
    counts = container.payment_service.clear_billing()
    print("OK: Deleted " + ", ".join(f"{n} {name}" for name, n in counts.items()))


if __name__ == "__main__":
    main()
