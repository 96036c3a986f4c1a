from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_errors, payload
from ..common.money import format_money
from ..container import Container
from .model import Course, SchoolClass, Student


def course_json(course: Course) -> dict:
    return {
        "id": course.course_id,
        "name": course.name,
        "hours": str(course.hours),
        "minutes": str(course.minutes),
        "price": format_money(course.price),
    }


def class_json(school_class: SchoolClass) -> dict:
    return {
        "id": school_class.class_id,
        "courseId": school_class.course_id,
        "cycleId": school_class.cycle_id,
        "courseName": school_class.name,
        "teacherName": school_class.teacher_name,
        "capacity": school_class.capacity,
    }


def student_json(student: Student) -> dict:
    return {
        "id": student.student_id,
        "firstName": student.first_name,
        "lastName": student.last_name,
        "phone": student.phone,
        "status": student.status.value,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/courses", methods=["GET"], endpoint="courses_list")
    def courses_list():
        return jsonify([course_json(c) for c in container.courses_repo.list_all()])

    @app.route("/api/courses", methods=["POST"], endpoint="courses_create")
    @json_errors
    def courses_create():
        data = payload()
        course = container.catalog_service.add_course(
            name=data.get("name", ""),
            price=data.get("price"),
            hours=data.get("hours", 0),
            minutes=data.get("minutes", 0),
        )
        return jsonify(course_json(course)), 201

    @app.route("/api/courses/<course_id>", methods=["PUT"], endpoint="courses_update")
    @json_errors
    def courses_update(course_id: str):
        data = payload()
        course = container.catalog_service.update_course(
            course_id=course_id,
            name=data.get("name", ""),
            price=data.get("price"),
            hours=data.get("hours", 0),
            minutes=data.get("minutes", 0),
        )
        return jsonify(course_json(course))

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @json_errors
    def classes_create():
        data = payload()
        school_class = container.catalog_service.add_class(
            course_id=data.get("courseId", ""),
            cycle_id=data.get("cycleId", ""),
            teacher_name=data.get("teacherName"),
            capacity=data.get("capacity"),
        )
        return jsonify(class_json(school_class)), 201

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    def students_list():
        return jsonify([student_json(s) for s in container.students_repo.list_all()])

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @json_errors
    def students_create():
        data = payload()
        student = container.catalog_service.add_student(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            phone=data.get("phone"),
        )
        return jsonify(student_json(student)), 201
