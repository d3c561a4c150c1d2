"""
Migration: copy a JSON data directory into the relational database.

- users, role grants, courses (with modules and lessons), quizzes, progress, certificates.
- Rows that already exist in the database are left untouched, so the script can be re-run.

Usage: DATA_DIR=data DATABASE_URL=sqlite:///./lms.db python migrations/import_json_data.py
"""

import os

from lms_api.config import SessionLocal, create_db
from lms_api.repositories import JsonStore, SqlStore, Store


def import_store(source: Store, target: Store) -> dict:
    counts = {"users": 0, "roles": 0, "courses": 0, "quizzes": 0, "progress": 0, "certificates": 0}

    for user in source.users.list_users():
        if target.users.get(user.id) is None:
            target.users.add(user)
            counts["users"] += 1

    for username, role in source.roles.list_grants().items():
        if target.roles.get_role(username) != role:
            target.roles.grant(username, role)
            counts["roles"] += 1

    for course in source.courses.list_courses():
        if target.courses.get_course(course.id) is None:
            target.courses.add_course(course)
            counts["courses"] += 1

    for quiz in source.quizzes.list_quizzes():
        if target.quizzes.get(quiz.id) is None:
            target.quizzes.add(quiz)
            counts["quizzes"] += 1

    for progress in source.progress.list_all():
        if target.progress.get(progress.user_id, progress.lesson_id) is None:
            target.progress.save(progress)
            counts["progress"] += 1

    for cert in source.certificates.list_certificates():
        _, created = target.certificates.issue(cert)
        if created:
            counts["certificates"] += 1

    return counts


def run_migration():
    data_dir = os.getenv("DATA_DIR", "data")
    create_db()
    target = SqlStore(SessionLocal())
    try:
        counts = import_store(JsonStore(data_dir), target)
    finally:
        target.close()
    for kind, count in counts.items():
        print(f"{kind}: imported {count}")


if __name__ == "__main__":
    run_migration()
