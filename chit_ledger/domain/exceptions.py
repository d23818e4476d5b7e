"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DataUnavailableError(DomainException):
    """Fund or payment history snapshot could not be read from the store"""

    pass


class StoreUnavailableError(DataUnavailableError):
    """Store is unreachable or returned an error"""

    pass


class FundNotFoundError(DataUnavailableError):
    """No chit fund exists with the requested id"""

    def __init__(self, fund_id: str):
        super().__init__(f"Chit fund {fund_id} not found")
        self.fund_id = fund_id


class UnsupportedIntervalError(DomainException):
    """Cycle interval type is not weekly, monthly or custom_days"""

    def __init__(self, interval_type: str):
        super().__init__(f"Unsupported interval type: {interval_type}")
        self.interval_type = interval_type
