from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .billing.discount import DiscountResolver
from .billing.document_repository import DocumentInstallmentRepository
from .billing.scheduler import InstallmentScheduler
from .catalog.document_repository import DocumentClassRepository, DocumentCourseRepository, DocumentStudentRepository
from .catalog.service import CatalogService
from .cycles.document_repository import DocumentCycleRepository
from .cycles.service import CycleService
from .database.connection import DatabaseConnection, DBConfig
from .database.mysql_document_store import MySQLDocumentStore
from .enrollments.document_repository import DocumentEnrollmentRepository
from .enrollments.service import EnrollmentLifecycleService
from .payments.document_repository import DocumentPaymentRepository
from .payments.service import PaymentService
from .reports.service import FinancialAggregator
from .storage.document_store import DocumentStore
from .storage.memory_store import InMemoryDocumentStore


@dataclass(frozen=True)
class Container:
    store: DocumentStore

    courses_repo: DocumentCourseRepository
    classes_repo: DocumentClassRepository
    students_repo: DocumentStudentRepository
    cycles_repo: DocumentCycleRepository
    enrollments_repo: DocumentEnrollmentRepository
    installments_repo: DocumentInstallmentRepository
    payments_repo: DocumentPaymentRepository

    discount_resolver: DiscountResolver
    scheduler: InstallmentScheduler
    catalog_service: CatalogService
    cycle_service: CycleService
    enrollment_service: EnrollmentLifecycleService
    payment_service: PaymentService
    financial_aggregator: FinancialAggregator


def build_store(*, backend: str = "memory", db_config: Optional[Mapping] = None) -> DocumentStore:
    if backend == "mysql":
        if not db_config:
            raise ValueError("DB_CONFIG is required for the mysql store backend")
        return MySQLDocumentStore(DatabaseConnection.get_instance(DBConfig.from_mapping(db_config)))
    if backend == "memory":
        return InMemoryDocumentStore()
    raise ValueError(f"Unknown store backend: {backend!r}")


def build_container(*, store: Optional[DocumentStore] = None, backend: str = "memory", db_config: Optional[Mapping] = None) -> Container:
    store = store or build_store(backend=backend, db_config=db_config)

    courses_repo = DocumentCourseRepository(store)
    classes_repo = DocumentClassRepository(store)
    students_repo = DocumentStudentRepository(store)
    cycles_repo = DocumentCycleRepository(store)
    enrollments_repo = DocumentEnrollmentRepository(store)
    installments_repo = DocumentInstallmentRepository(store)
    payments_repo = DocumentPaymentRepository(store)

    discount_resolver = DiscountResolver()
    scheduler = InstallmentScheduler(installments_repo, discounts=discount_resolver)
    catalog_service = CatalogService(courses_repo, classes_repo, students_repo, cycles_repo)
    cycle_service = CycleService(cycles_repo)
    enrollment_service = EnrollmentLifecycleService(
        enrollments_repo,
        installments_repo,
        classes_repo,
        courses_repo,
        cycles_repo,
        scheduler=scheduler,
    )
    payment_service = PaymentService(
        payments_repo,
        installments_repo,
        enrollments_repo,
        classes_repo,
        cycles_repo,
        discounts=discount_resolver,
    )
    financial_aggregator = FinancialAggregator(
        enrollments_repo,
        installments_repo,
        classes_repo,
        courses_repo,
        students_repo,
        cycles_repo,
        payments_repo,
        discounts=discount_resolver,
    )

    return Container(
        store=store,
        courses_repo=courses_repo,
        classes_repo=classes_repo,
        students_repo=students_repo,
        cycles_repo=cycles_repo,
        enrollments_repo=enrollments_repo,
        installments_repo=installments_repo,
        payments_repo=payments_repo,
        discount_resolver=discount_resolver,
        scheduler=scheduler,
        catalog_service=catalog_service,
        cycle_service=cycle_service,
        enrollment_service=enrollment_service,
        payment_service=payment_service,
        financial_aggregator=financial_aggregator,
    )
