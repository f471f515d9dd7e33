from .enums import UniversityType, Governorate, StudyType, UserRole
from .universities import University
from .colleges import College
from .departments import Department
from .branches import UniversityBranch
from .users import User
from .news import News
