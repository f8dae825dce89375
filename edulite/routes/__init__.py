from fastapi import APIRouter

from . import (
    auth,
    class_activity,
    classes,
    enrollments,
    homework,
    student_records,
    students,
    subjects,
    teachers,
    users,
)

router = APIRouter()
router.include_router(auth.router)
router.include_router(students.router)
router.include_router(teachers.router)
router.include_router(users.router)
router.include_router(classes.router)
router.include_router(subjects.router)
router.include_router(enrollments.router)
router.include_router(homework.router)
router.include_router(class_activity.router)
router.include_router(student_records.router)
