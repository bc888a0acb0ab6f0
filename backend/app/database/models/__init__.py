# Import all models to ensure they're registered with Base
from .group import Group
from .student import Student
from .teacher import Teacher
from .subject import Subject
from .grade import Grade

__all__ = ["Group", "Student", "Teacher", "Subject", "Grade"]
