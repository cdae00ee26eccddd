import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Test = "test"
    Local = "local"


class EnrollmentRole(enum.Enum):
    Grader = "grader"
    Student = "student"


class SheetMode(enum.Enum):
    # no grading link yet, the activation control is shown
    Setup = "setup"
    # the activity owns a native grade record
    Unavailable = "unavailable"
    Active = "active"
