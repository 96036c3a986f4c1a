"""School Billing package.

This package is organized by feature modules (cycles, enrollments, billing,
payments, reports, ...) with a thin Flask controller layer and
service/repository layers over a document store.
"""
