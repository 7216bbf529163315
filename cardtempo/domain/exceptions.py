"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ReminderNotFoundError(DomainException):
    """No stored reminder matches the requested id"""

    pass


class NoFutureRemindersError(DomainException):
    """Every payment in the plan is too close to schedule a reminder"""

    pass
