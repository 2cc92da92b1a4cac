from functools import wraps


class RPNError(Exception):
    pass


class NotFound(RPNError):
    '''
    Handle doesn't refer to a live calculator.
    '''


class Insufficient(RPNError):
    '''
    Not enough elements on the stack for the operation.
    '''


class Invalid(RPNError):
    '''
    Malformed argument: unknown operator, bad index, unconvertible value.
    '''


class OutOfMemory(RPNError):
    '''
    Couldn't allocate a calculator or a stack entry.
    '''


def reraise(exceptions, error, fmt):
    '''
    Decorator that converts library exceptions to calculator errors.

    Passes through RPNErrors. Anything matching exceptions is raised again as
    error, with fmt formatted from the call's arguments as message.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RPNError:
                raise
            except exceptions as e:
                raise error(fmt.format(*args, **kwargs)) from e
        return wrapper
    return decorator
