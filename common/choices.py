"""Shared enumerations and choices used across apps."""

from django.db import models


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    EMPLOYEE = "employee", "Employee"


class Department(models.TextChoices):
    CMS = "CMS", "CMS"
    DIGITAL_MARKETING = "Digital Marketing", "Digital Marketing"
    MANAGEMENT = "Management", "Management"
    MERN_STACK = "MERN Stack", "MERN Stack"
    SALES = "Sales", "Sales"
    UI_UX = "UI/UX", "UI/UX"


class ItemCategory(models.TextChoices):
    LAPTOP = "Laptop", "Laptop"
    DESKTOP = "Desktop", "Desktop"
    ACCESSORIES = "Accessories", "Accessories"
    FURNITURE = "Furniture", "Furniture"
    OTHER = "Other", "Other"


class ItemCondition(models.TextChoices):
    GOOD = "Good", "Good"
    DAMAGED = "Damaged", "Damaged"


class StockStatus(models.TextChoices):
    """Derived item status; only two states are produced."""

    UNASSIGNED = "Unassigned", "Unassigned"
    ASSIGNED = "Assigned", "Assigned"


class RequestStatus(models.TextChoices):
    """Lifecycle statuses for asset requests."""

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    COMPLETED = "completed", "Completed"


class Urgency(models.TextChoices):
    NORMAL = "Normal", "Normal"
    URGENT = "Urgent", "Urgent"


class AssignmentStatus(models.TextChoices):
    ASSIGNED = "assigned", "Assigned"
    RETURNED = "returned", "Returned"


class HistoryAction(models.TextChoices):
    """Action types recorded in the audit log."""

    REQUESTED = "requested", "Requested"
    ASSIGNED = "assigned", "Assigned"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    COMPLETED = "completed", "Completed"
    RETURNED = "returned", "Returned"
