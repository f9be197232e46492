# Database models

from edustats.models.user import Gender, User
from edustats.models.admin import Admin
from edustats.models.subscription import CompteGratuit, Payment
from edustats.models.school_year import SchoolYear
from edustats.models.school_class import SchoolClass
from edustats.models.student import Student
from edustats.models.subject import Subject
from edustats.models.evaluation import Evaluation
from edustats.models.grade import Moyenne, Note
from edustats.models.class_settings import ClassAverageConfig, ClassThreshold
from edustats.models.evaluation_formula import EvaluationFormula

__all__ = [
    "Gender",
    "User",
    "Admin",
    "CompteGratuit",
    "Payment",
    "SchoolYear",
    "SchoolClass",
    "Student",
    "Subject",
    "Evaluation",
    "Note",
    "Moyenne",
    "ClassAverageConfig",
    "ClassThreshold",
    "EvaluationFormula",
]
