"""Example: drive the billing services directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

from src.school_billing.school_billing.container import build_container


def main():
    container = build_container(backend="memory")

    cycle = container.cycle_service.create_cycle(name="Summer 2025", start_date="2025-01-01", end_date="2025-03-31")
    container.cycle_service.add_event(
        cycle_id=cycle.cycle_id,
        name="Carnival",
        start_date="2025-02-25",
        end_date="2025-03-02",
        discount_percentage="50",
    )
    course = container.catalog_service.add_course(name="Advanced Mathematics", price="100")
    school_class = container.catalog_service.add_class(course_id=course.course_id, cycle_id=cycle.cycle_id)
    student = container.catalog_service.add_student(first_name="Juan", last_name="Perez")

    plan = container.enrollment_service.create(
        student_id=student.student_id,
        class_id=school_class.class_id,
        start_date="2025-01-15",
    )
    for inst in plan.installments:
        print(inst.month, inst.due_date, inst.amount, inst.notes or "")


if __name__ == "__main__":
    main()
