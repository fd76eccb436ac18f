"""Custom errors for the reward contract model"""

class ProtocolError(Exception):
    """Base error class for protocol errors"""
    pass

class UnauthorizedError(ProtocolError):
    """Sender does not match the principal configured for the operation"""
    pass

class UninitializedError(ProtocolError):
    """Config or state record is missing from storage"""
    pass

class InvalidStateError(ProtocolError):
    """A precondition on stored state is violated"""
    pass

class ArithmeticUnderflowError(ProtocolError):
    """Checked subtraction would go negative"""
    pass

class ArithmeticOverflowError(ProtocolError):
    """Result does not fit the target integer width"""
    pass

class DivisionByZeroError(ProtocolError):
    """Error for division by zero"""
    pass

class InvalidAmountError(ProtocolError):
    """Error for zero or otherwise unusable transfer amounts"""
    pass

class ValidationError(ProtocolError):
    """Error for invalid parameters at construction time"""
    pass

class UnknownMessageError(ProtocolError):
    """Message kind not recognised by the contract"""
    pass

class HostError(ProtocolError):
    """Failure inside the simulated host ledger (funds, swap pairs)"""
    pass
