"""
Enum definitions for the Employee Records API
"""

from enum import Enum


class Department(str, Enum):
    """Departments an employee can belong to"""
    IT = "IT"
    HR = "HR"
    FINANCE = "Finance"
    MARKETING = "Marketing"
    OPERATIONS = "Operations"
    SALES = "Sales"
    RESEARCH = "Research"


class FormStatus(str, Enum):
    """
    Submission state of a client-side employee form.

    - IDLE: waiting for input
    - SUBMITTING: a create or update request is in flight
    - SUCCESS: the last submission was stored
    - ERROR: the last submission failed and the entered data was kept
    """
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"
