"""Delete the payment history and mark every installment unpaid again.

Enrollments and installment schedules are kept.
"""

from __future__ import annotations

from _common import settings_container


def main() -> None:
    _, container = settings_container()
    counts = container.payment_service.clear_payments()
    print(f"OK: Deleted {counts['payments']} payments, reset {counts['installments']} installments to unpaid")


if __name__ == "__main__":
    main()
