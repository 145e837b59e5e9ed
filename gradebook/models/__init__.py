# gradebook/models/__init__.py
# Importing the package registers every table on Base.metadata
from gradebook.models.user import User  # noqa
from gradebook.models.course import Course  # noqa
from gradebook.models.grade import Grade  # noqa
from gradebook.models.attendance import AttendanceRecord  # noqa
from gradebook.models.evaluation import Evaluation  # noqa
